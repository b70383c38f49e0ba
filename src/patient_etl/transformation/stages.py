"""Clean, normalize and validate stages for patient admission records.

Every stage takes a DataFrame and returns a new one; inputs are never
modified. No stage performs I/O or logging. Failures are raised as
SchemaError / ColumnTypeError carrying the stage and column name.
"""

import warnings
from datetime import datetime

import numpy as np
import pandas as pd
from pandas.api.types import is_datetime64_any_dtype, is_string_dtype

from patient_etl.errors import ColumnTypeError, EmptyResultWarning, SchemaError
from patient_etl.schema import (
    AGE,
    BILLING_AMOUNT,
    BILLING_DIVISOR,
    DATE_FORMAT,
    DATE_OF_ADMISSION,
    LOWERCASE_COLUMNS,
    MAX_AGE,
    MIN_AGE,
    OUTPUT_COLUMNS,
)


def transform(df: pd.DataFrame) -> pd.DataFrame:
    """Run clean -> normalize -> validate.

    The first stage error propagates and later stages do not run. A
    zero-row result emits EmptyResultWarning and is still returned.
    """
    result = validate(normalize(clean(df)))
    if result.empty:
        warnings.warn(
            f"transformation kept 0 of {len(df)} rows",
            EmptyResultWarning,
            stacklevel=2,
        )
    return result


def clean(df: pd.DataFrame) -> pd.DataFrame:
    """Lowercase the Name and Gender columns.

    Values that are not strings become None.
    """
    _require_columns(df, LOWERCASE_COLUMNS, stage="clean")
    out = df.copy()
    for column in LOWERCASE_COLUMNS:
        if not _is_text(out[column]):
            raise SchemaError(
                f"expected a text column, got dtype {out[column].dtype}",
                stage="clean",
                column=column,
            )
        out[column] = out[column].map(_lowercase)
    return out


def normalize(df: pd.DataFrame) -> pd.DataFrame:
    """Filter ages, drop null rows, project, rescale billing, parse dates.

    Rows with a null in any column are dropped before the projection, so a
    null Name still removes its row even though Name is not kept.
    """
    _require_columns(df, OUTPUT_COLUMNS, stage="normalize")

    age = _to_number(df[AGE], stage="normalize")
    billing = _to_number(df[BILLING_AMOUNT], stage="normalize")
    out = df.assign(**{AGE: age, BILLING_AMOUNT: billing})
    out = out.loc[age.between(MIN_AGE, MAX_AGE, inclusive="both")].dropna(how="any")

    out = out[OUTPUT_COLUMNS].copy()
    out[BILLING_AMOUNT] = out[BILLING_AMOUNT].astype("float64") / BILLING_DIVISOR
    out[DATE_OF_ADMISSION] = _parse_dates(out[DATE_OF_ADMISSION])
    out[AGE] = out[AGE].astype("int32")
    return out.reset_index(drop=True)


def validate(df: pd.DataFrame) -> pd.DataFrame:
    """Keep only rows whose Date of Admission parsed."""
    _require_columns(df, [DATE_OF_ADMISSION], stage="validate")
    dates = df[DATE_OF_ADMISSION]
    if not is_datetime64_any_dtype(dates.dtype):
        raise ColumnTypeError(
            f"expected a date column, got dtype {dates.dtype}",
            stage="validate",
            column=DATE_OF_ADMISSION,
        )
    has_date = dates.notna()
    return df.loc[has_date].reset_index(drop=True)


def _require_columns(df: pd.DataFrame, columns: list[str], stage: str) -> None:
    for column in columns:
        if column not in df.columns:
            raise SchemaError("required column is missing", stage=stage, column=column)


def _is_text(series: pd.Series) -> bool:
    # An all-null column has no values to infer a type from.
    return is_string_dtype(series.dtype) or bool(series.isna().all())


def _lowercase(value):
    return value.lower() if isinstance(value, str) else None


def _to_number(series: pd.Series, stage: str) -> pd.Series:
    try:
        return pd.to_numeric(series, errors="raise")
    except (ValueError, TypeError) as e:
        raise ColumnTypeError(
            f"cannot cast to a number: {e}", stage=stage, column=series.name
        ) from e


def _parse_dates(series: pd.Series) -> pd.Series:
    if is_datetime64_any_dtype(series.dtype):
        return series.dt.normalize()
    # Second resolution covers years 1-9999; nanoseconds stop at 2262.
    parsed = np.array([_parse_date(value) for value in series], dtype="datetime64[s]")
    return pd.Series(parsed, index=series.index, name=series.name)


def _parse_date(value) -> np.datetime64:
    # Unparseable values become NaT; validate() removes them.
    try:
        return np.datetime64(datetime.strptime(str(value), DATE_FORMAT), "s")
    except ValueError:
        return np.datetime64("NaT", "s")
