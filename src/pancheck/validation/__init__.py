"""PAN structural validation rules."""

from .patterns import has_adjacent_repetition, is_strict_sequence
from .format import is_valid_format, format_violations, RULES

__all__ = [
    "has_adjacent_repetition",
    "is_strict_sequence",
    "is_valid_format",
    "format_violations",
    "RULES",
]
