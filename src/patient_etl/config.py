"""Runtime configuration read from the environment.

CLI scripts call ``load_dotenv()`` first, so values may also come from a
``.env`` file. Command-line flags override anything read here.
"""

import os
from dataclasses import dataclass

from patient_etl.errors import ConfigError

DEFAULT_POOL_SIZE = 5
DEFAULT_CHUNK_SIZE = 500
DEFAULT_WORKERS = 1
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0


@dataclass(frozen=True)
class PipelineConfig:
    """Validated pipeline settings.

    Attributes:
        database_url: sqlite:/// or postgresql:// URL, if set.
        csv_path: Source CSV path, if set.
        pool_size: Connections held by the database pool.
        chunk_size: Rows per insert transaction.
        workers: Concurrent insert threads.
        max_attempts: Ingestion attempts before giving up.
        retry_delay: Base delay in seconds between ingestion attempts.
    """

    database_url: str | None = None
    csv_path: str | None = None
    pool_size: int = DEFAULT_POOL_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    workers: int = DEFAULT_WORKERS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Build config from process environment variables.

        Raises:
            ConfigError: If a numeric value is malformed or out of range.
        """
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            csv_path=os.getenv("PATIENTS_CSV_PATH") or None,
            pool_size=_positive_int("DB_POOL_SIZE", DEFAULT_POOL_SIZE),
            chunk_size=_positive_int("PIPELINE_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            workers=_positive_int("PIPELINE_WORKERS", DEFAULT_WORKERS),
            max_attempts=_positive_int("INGEST_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            retry_delay=_non_negative_float("INGEST_RETRY_DELAY", DEFAULT_RETRY_DELAY),
        )


def _positive_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        value = int(raw_value)
    except ValueError as error:
        raise ConfigError(f"Invalid {name} value: expected integer, got '{raw_value}'.") from error
    if value < 1:
        raise ConfigError(f"Invalid {name} value: must be >= 1, got {value}.")
    return value


def _non_negative_float(name: str, default: float) -> float:
    raw_value = os.getenv(name)
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        value = float(raw_value)
    except ValueError as error:
        raise ConfigError(f"Invalid {name} value: expected number, got '{raw_value}'.") from error
    if value < 0:
        raise ConfigError(f"Invalid {name} value: must be >= 0, got {value}.")
    return value
