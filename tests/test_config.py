"""Tests for environment configuration."""

import pytest

from patient_etl.config import PipelineConfig
from patient_etl.errors import ConfigError

ENV_VARS = [
    "DATABASE_URL",
    "PATIENTS_CSV_PATH",
    "DB_POOL_SIZE",
    "PIPELINE_CHUNK_SIZE",
    "PIPELINE_WORKERS",
    "INGEST_MAX_ATTEMPTS",
    "INGEST_RETRY_DELAY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestPipelineConfig:
    def test_defaults(self):
        config = PipelineConfig.from_env()
        assert config.database_url is None
        assert config.csv_path is None
        assert config.pool_size == 5
        assert config.chunk_size == 500
        assert config.workers == 1
        assert config.max_attempts == 3
        assert config.retry_delay == 1.0

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://etl:etl@db/patients")
        monkeypatch.setenv("PATIENTS_CSV_PATH", "/data/healthcare.csv")
        monkeypatch.setenv("PIPELINE_WORKERS", "4")
        monkeypatch.setenv("INGEST_RETRY_DELAY", "0.25")
        config = PipelineConfig.from_env()
        assert config.database_url == "postgresql://etl:etl@db/patients"
        assert config.csv_path == "/data/healthcare.csv"
        assert config.workers == 4
        assert config.retry_delay == 0.25

    def test_blank_values_use_defaults(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "")
        monkeypatch.setenv("DB_POOL_SIZE", "  ")
        config = PipelineConfig.from_env()
        assert config.database_url is None
        assert config.pool_size == 5

    @pytest.mark.parametrize(
        "name, value",
        [
            ("DB_POOL_SIZE", "many"),
            ("PIPELINE_CHUNK_SIZE", "0"),
            ("INGEST_MAX_ATTEMPTS", "-1"),
            ("INGEST_RETRY_DELAY", "soon"),
            ("INGEST_RETRY_DELAY", "-0.5"),
        ],
    )
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError, match=name):
            PipelineConfig.from_env()

    def test_frozen(self):
        config = PipelineConfig.from_env()
        with pytest.raises(AttributeError):
            config.workers = 8
