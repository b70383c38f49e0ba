"""CSV ingestion of patient records into a DataFrame."""

import logging
import time
from pathlib import Path

import pandas as pd

from patient_etl.errors import IngestionError, RetryableIngestionError

logger = logging.getLogger(__name__)


def read_csv(file_path: str | Path) -> pd.DataFrame:
    """Read a headered CSV file into a DataFrame.

    Dates are left as text; parsing them is the transformation's job.

    Raises:
        RetryableIngestionError: the file could not be opened or read.
        IngestionError: the file is empty or not valid CSV.
    """
    logger.info("Reading patient records from %s", file_path)
    try:
        df = pd.read_csv(file_path)
    except OSError as e:
        # Includes FileNotFoundError and PermissionError.
        raise RetryableIngestionError(f"Cannot read {file_path}: {e}") from e
    except pd.errors.EmptyDataError as e:
        raise IngestionError(f"{file_path} is empty") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise IngestionError(f"{file_path} is not valid CSV: {e}") from e

    logger.info("Read %d rows with columns %s", len(df), list(df.columns))
    return df


def read_csv_with_retry(
    file_path: str | Path,
    max_attempts: int = 3,
    base_delay: float = 1.0,
) -> pd.DataFrame:
    """Read a CSV file, retrying retryable failures with exponential backoff.

    Permanent failures (IngestionError that is not retryable) are raised on
    the first attempt. After max_attempts retryable failures the last error
    is raised.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    for attempt in range(max_attempts):
        try:
            return read_csv(file_path)
        except RetryableIngestionError as e:
            if attempt < max_attempts - 1:
                delay = base_delay * (2**attempt)
                logger.warning(
                    "Attempt %d/%d failed: %s. Retrying in %.1fs...",
                    attempt + 1,
                    max_attempts,
                    e,
                    delay,
                )
                time.sleep(delay)
            else:
                logger.error("Giving up on %s after %d attempts", file_path, max_attempts)
                raise
