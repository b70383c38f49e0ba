"""CLI entry point for the patient ETL pipeline.

Usage:
    python -m scripts.run_pipeline --db-url sqlite:///patients.db --file healthcare.csv \
        [--chunk-size 500] [--workers 4] [--max-attempts 3] [--replace] [--show 5]

DATABASE_URL and PATIENTS_CSV_PATH (environment or .env) are used when the
flags are omitted.
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

from patient_etl import create_service, run_pipeline
from patient_etl.config import PipelineConfig
from patient_etl.errors import PipelineError
from patient_etl.storage import fetch_patients
from scripts.show_patients import format_rows

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_parser(config: PipelineConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load patient records from CSV into the database")
    parser.add_argument(
        "--db-url",
        default=config.database_url,
        help="Database URL (sqlite:/// or postgresql://), defaults to $DATABASE_URL",
    )
    parser.add_argument(
        "--file", default=config.csv_path, help="Path to CSV file, defaults to $PATIENTS_CSV_PATH"
    )
    parser.add_argument(
        "--chunk-size", type=int, default=config.chunk_size, help="Rows per insert transaction"
    )
    parser.add_argument(
        "--workers", type=int, default=config.workers, help="Concurrent insert threads"
    )
    parser.add_argument(
        "--max-attempts", type=int, default=config.max_attempts, help="CSV read attempts"
    )
    parser.add_argument(
        "--replace", action="store_true", help="Empty the patients table before loading"
    )
    parser.add_argument(
        "--show", type=int, default=0, metavar="N", help="Print the first N stored rows"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    try:
        config = PipelineConfig.from_env()
    except PipelineError as e:
        logger.error("%s", e)
        return 1

    args = build_parser(config).parse_args(argv)
    if not args.db_url or not args.file:
        logger.error("Both --db-url and --file are required (or DATABASE_URL / PATIENTS_CSV_PATH).")
        return 1

    service = create_service(args.db_url, pool_size=max(config.pool_size, args.workers))
    service.connect()
    try:
        result = run_pipeline(
            service,
            args.file,
            max_attempts=args.max_attempts,
            retry_delay=config.retry_delay,
            chunk_size=args.chunk_size,
            max_workers=args.workers,
            replace=args.replace,
        )
        logger.info(
            "Done. read=%d transformed=%d stored=%d",
            result.rows_read,
            result.rows_transformed,
            result.rows_stored,
        )
        if args.show > 0:
            print(format_rows(fetch_patients(service, limit=args.show)))
    except PipelineError as e:
        logger.error("Pipeline failed: %s", e)
        return 1
    finally:
        service.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
