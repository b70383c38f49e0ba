"""Shared test fixtures."""

import csv
from pathlib import Path

import pandas as pd
import pytest

from patient_etl import create_service
from patient_etl.schema import INPUT_COLUMNS


def _record(**overrides) -> dict:
    """One valid ingestion-schema record, with keyword overrides by column name."""
    record = {
        "Name": "Alice",
        "Gender": "Female",
        "Age": 25,
        "Blood Type": "A+",
        "Medical Condition": "Diabetes",
        "Billing Amount": 1000.0,
        "Medication": "Aspirin",
        "Test Results": "Normal",
        "Date of Admission": "2023-01-01",
        "Admission Type": "Emergency",
    }
    for key, value in overrides.items():
        record[key.replace("_", " ")] = value
    return record


@pytest.fixture
def patients_frame() -> pd.DataFrame:
    """Alice is valid, BOB is too old, Charlie has an unparseable date."""
    return pd.DataFrame(
        [
            _record(),
            _record(
                Name="BOB", Gender="Male", Age=150, Billing_Amount=2000.0, Date_of_Admission="2023-02-15"
            ),
            _record(
                Name="Charlie", Gender="Male", Age=30, Billing_Amount=3000.0, Date_of_Admission="invalid"
            ),
        ],
        columns=INPUT_COLUMNS,
    )


@pytest.fixture
def write_csv(tmp_path):
    """Write rows (lists of cells) under the ingestion header and return the path."""

    def _write(rows: list[list], name: str = "patients.csv", header: list[str] = INPUT_COLUMNS) -> Path:
        csv_file = tmp_path / name
        with open(csv_file, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(header)
            writer.writerows(rows)
        return csv_file

    return _write


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def make_record():
    """Factory for single records: make_record(Age=30, Date_of_Admission="bad")."""
    return _record
