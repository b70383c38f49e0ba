"""Patient admissions ETL: CSV ingestion, pandas transformation, SQL storage."""

from patient_etl.database import DatabaseService, create_service
from patient_etl.pipeline import PipelineResult, run_pipeline
from patient_etl.transformation import clean, normalize, transform, validate

__all__ = [
    "DatabaseService",
    "create_service",
    "PipelineResult",
    "run_pipeline",
    "clean",
    "normalize",
    "validate",
    "transform",
]
