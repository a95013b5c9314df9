"""pancheck: PAN number cleaning and structural validation."""

from pancheck.validation import has_adjacent_repetition, is_strict_sequence, is_valid_format
from pancheck.processing import clean
from pancheck.classification import classify
from pancheck.reporting import summarize
from pancheck.domain.models import Status, ClassificationResult, SummaryCounts

__version__ = "0.1.0"

__all__ = [
    "has_adjacent_repetition",
    "is_strict_sequence",
    "is_valid_format",
    "clean",
    "classify",
    "summarize",
    "Status",
    "ClassificationResult",
    "SummaryCounts",
]
