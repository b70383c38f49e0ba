"""Patients table persistence and read-back."""

from patient_etl.storage.patients import (
    clear_patients,
    count_patients,
    ensure_patients_schema,
    fetch_patients,
    store_patients,
    to_db_rows,
)

__all__ = [
    "ensure_patients_schema",
    "to_db_rows",
    "store_patients",
    "clear_patients",
    "fetch_patients",
    "count_patients",
]
