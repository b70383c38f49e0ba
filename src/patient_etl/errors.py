"""Exception and warning types raised across the pipeline."""


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class ConfigError(PipelineError, ValueError):
    """An environment or CLI setting is invalid."""


class TransformationError(PipelineError):
    """A transformation stage rejected its input.

    Carries the stage and column so callers can log the failure without the
    transformation code logging anything itself.
    """

    def __init__(self, message: str, stage: str, column: str | None = None):
        super().__init__(message)
        self.stage = stage
        self.column = column

    def __str__(self) -> str:
        if self.column is None:
            return f"[{self.stage}] {self.args[0]}"
        return f"[{self.stage}] column {self.column!r}: {self.args[0]}"


class SchemaError(TransformationError):
    """A required column is missing or has an unexpected base type."""


class ColumnTypeError(TransformationError, TypeError):
    """Values of a column cannot be cast to the column's target type."""


class EmptyResultWarning(UserWarning):
    """The transformation produced zero rows."""


class IngestionError(PipelineError):
    """The source file cannot be read. Retrying will not help."""


class RetryableIngestionError(IngestionError):
    """The source file could not be read, but a later attempt may succeed."""


class StorageError(PipelineError):
    """Persisting rows to the database failed."""
