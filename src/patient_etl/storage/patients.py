"""Persistence and read-back of transformed patient records."""

import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pandas as pd

from patient_etl.database import DatabaseService, Row
from patient_etl.errors import SchemaError, StorageError
from patient_etl.schema import (
    AGE,
    BILLING_AMOUNT,
    DATE_OF_ADMISSION,
    OUTPUT_COLUMNS,
    PATIENTS_COLUMNS,
    PATIENTS_TABLE,
    patients_ddl,
)

logger = logging.getLogger(__name__)


def ensure_patients_schema(service: DatabaseService) -> None:
    """Create the patients table if it doesn't exist."""
    service.execute_ddl(patients_ddl(service.dialect))


def to_db_rows(df: pd.DataFrame) -> list[tuple]:
    """Convert transformed rows into tuples matching PATIENTS_COLUMNS.

    Age becomes int, Billing Amount a Decimal built from the float's shortest
    repr (so 2.5 is stored as exactly 2.5), Date of Admission an ISO date
    string, everything else str.
    """
    missing = [c for c in OUTPUT_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaError("required column is missing", stage="storage", column=missing[0])

    rows = []
    for record in df[OUTPUT_COLUMNS].itertuples(index=False, name=None):
        values = dict(zip(OUTPUT_COLUMNS, record))
        row = []
        for column in OUTPUT_COLUMNS:
            value = values[column]
            if column == AGE:
                row.append(int(value))
            elif column == BILLING_AMOUNT:
                row.append(Decimal(repr(float(value))))
            elif column == DATE_OF_ADMISSION:
                row.append(pd.Timestamp(value).date().isoformat())
            else:
                row.append(str(value))
        rows.append(tuple(row))
    return rows


def store_patients(
    service: DatabaseService,
    df: pd.DataFrame,
    chunk_size: int = 500,
    max_workers: int = 1,
) -> int:
    """Insert transformed rows into the patients table.

    Each chunk is its own transaction. Chunks are submitted to a thread pool
    of at most max_workers threads. A failed chunk rolls back, chunks not yet
    started are cancelled, and the failure is raised as StorageError. Chunks
    already committed stay committed.

    Returns the number of rows stored.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    rows = to_db_rows(df)
    if not rows:
        logger.info("No rows to store")
        return 0

    chunks = [rows[i : i + chunk_size] for i in range(0, len(rows), chunk_size)]

    def insert_chunk(chunk: list[tuple]) -> int:
        with service.transaction():
            service.batch_insert(PATIENTS_TABLE, PATIENTS_COLUMNS, chunk)
        return len(chunk)

    total = 0
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(insert_chunk, chunk) for chunk in chunks]
        for i, future in enumerate(futures):
            try:
                stored = future.result()
            except Exception as e:
                pool.shutdown(wait=True, cancel_futures=True)
                raise StorageError(f"Failed to insert chunk {i + 1}/{len(chunks)}: {e}") from e
            total += stored
            logger.info("Chunk %d: inserted %d rows (total: %d)", i + 1, stored, total)

    logger.info("Stored %d patient rows", total)
    return total


def clear_patients(service: DatabaseService) -> None:
    """Delete every row from the patients table."""
    with service.transaction():
        service.execute(f"DELETE FROM {PATIENTS_TABLE}")
    logger.info("Cleared table %s", PATIENTS_TABLE)


def fetch_patients(service: DatabaseService, limit: int = 5) -> list[Row]:
    """Return the first ``limit`` stored rows, ordered by id."""
    with service.transaction():
        return service.execute(f"SELECT * FROM {PATIENTS_TABLE} ORDER BY id LIMIT {int(limit)}")


def count_patients(service: DatabaseService) -> int:
    with service.transaction():
        rows = service.execute(f"SELECT COUNT(*) AS cnt FROM {PATIENTS_TABLE}")
    return int(rows[0]["cnt"])
