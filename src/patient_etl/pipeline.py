"""Ingest -> transform -> store, run strictly in sequence."""

import logging
import warnings
from dataclasses import dataclass
from pathlib import Path

from patient_etl.database import DatabaseService
from patient_etl.errors import EmptyResultWarning, TransformationError
from patient_etl.ingestion import read_csv_with_retry
from patient_etl.storage import clear_patients, ensure_patients_schema, store_patients
from patient_etl.transformation import transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    rows_read: int
    rows_transformed: int
    rows_stored: int


def run_pipeline(
    service: DatabaseService,
    csv_path: str | Path,
    *,
    max_attempts: int = 3,
    retry_delay: float = 1.0,
    chunk_size: int = 500,
    max_workers: int = 1,
    replace: bool = False,
) -> PipelineResult:
    """Run the whole pipeline against a connected service.

    Transformation only starts once ingestion has returned, and storage only
    once transformation has returned. With ``replace`` the patients table is
    emptied before new rows are inserted.
    """
    raw = read_csv_with_retry(csv_path, max_attempts=max_attempts, base_delay=retry_delay)

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", EmptyResultWarning)
            transformed = transform(raw)
    except TransformationError as e:
        logger.error("Transformation failed in stage %s (column %s): %s", e.stage, e.column, e)
        raise
    for warning in caught:
        logger.warning("%s", warning.message)
    logger.info("Transformed %d of %d rows", len(transformed), len(raw))

    ensure_patients_schema(service)
    if replace:
        clear_patients(service)

    stored = 0
    if not transformed.empty:
        stored = store_patients(
            service, transformed, chunk_size=chunk_size, max_workers=max_workers
        )
    return PipelineResult(
        rows_read=len(raw), rows_transformed=len(transformed), rows_stored=stored
    )
