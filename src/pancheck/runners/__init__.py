"""Pipeline runners."""

from .pipeline import (
    PanValidationPipeline,
    PipelineResult,
    ValidationOutcome,
    run_pan_validation,
    validate_records,
)

__all__ = [
    "PanValidationPipeline",
    "PipelineResult",
    "ValidationOutcome",
    "run_pan_validation",
    "validate_records",
]
