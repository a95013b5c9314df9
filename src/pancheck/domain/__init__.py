"""Core domain models and business logic."""

from .models import (
    Status,
    ClassificationResult,
    SummaryCounts,
    DataQualityReport,
)

__all__ = [
    "Status",
    "ClassificationResult",
    "SummaryCounts",
    "DataQualityReport",
]
