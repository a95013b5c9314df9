"""Normalisation and de-duplication of raw PAN records."""

import logging
from typing import Iterable, Optional, Set

from pancheck.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)


def normalize(record: Optional[str]) -> Optional[str]:
    """
    Trim and upper-case a single raw record.

    Returns None for records that carry no value (null, or blank once
    trimmed); such records never reach classification.
    """
    if record is None:
        return None
    if not isinstance(record, str):
        raise ValidationError(
            f"Raw records must be strings or None, got {type(record).__name__}",
            field_name="record",
            field_value=record
        ).add_suggestion("Convert input values to text before cleaning")
    trimmed = record.strip()
    if not trimmed:
        return None
    return trimmed.upper()


def clean(raw_records: Iterable[Optional[str]]) -> Set[str]:
    """
    Build the cleaned identifier set from raw records.

    Nulls and blanks are dropped, the rest are trimmed and upper-cased, and
    values equal after normalisation collapse into one entry. No other
    merging happens.
    """
    cleaned: Set[str] = set()
    total = 0
    dropped = 0
    for record in raw_records:
        total += 1
        value = normalize(record)
        if value is None:
            dropped += 1
            continue
        cleaned.add(value)

    logger.debug(
        "Cleaned %d raw records: %d distinct, %d null/blank, %d duplicates",
        total, len(cleaned), dropped, total - dropped - len(cleaned)
    )
    return cleaned
