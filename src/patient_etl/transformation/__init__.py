"""Pure transformation stages: clean, normalize, validate."""

from patient_etl.transformation.stages import clean, normalize, transform, validate

__all__ = ["clean", "normalize", "validate", "transform"]
