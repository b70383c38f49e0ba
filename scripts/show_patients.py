"""CLI entry point for reading back stored patient rows.

Usage:
    python -m scripts.show_patients --db-url sqlite:///patients.db [--limit 5]
"""

import argparse
import logging
import os
import sys

import pandas as pd
from dotenv import load_dotenv

from patient_etl import create_service
from patient_etl.storage import count_patients, fetch_patients

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def format_rows(rows: list[dict]) -> str:
    if not rows:
        return "(no rows)"
    return pd.DataFrame(rows).to_string(index=False)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Show stored patient rows")
    parser.add_argument("--db-url", default=None, help="Database URL, defaults to $DATABASE_URL")
    parser.add_argument("--limit", type=int, default=5, help="Number of rows to show")
    args = parser.parse_args(argv)

    db_url = args.db_url or os.getenv("DATABASE_URL")
    if not db_url:
        logger.error("DATABASE_URL not set. Pass --db-url.")
        return 1

    service = create_service(db_url, pool_size=1)
    service.connect()
    try:
        total = count_patients(service)
        print(format_rows(fetch_patients(service, limit=args.limit)))
        logger.info("Showing %d of %d rows.", min(args.limit, total), total)
    finally:
        service.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
