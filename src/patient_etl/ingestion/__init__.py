"""CSV ingestion with retry."""

from patient_etl.ingestion.csv_ingest import read_csv, read_csv_with_retry

__all__ = ["read_csv", "read_csv_with_retry"]
