"""Data quality profile of the raw input."""

import logging
from collections import Counter
from typing import Iterable, Optional

from pancheck.domain.exceptions import ValidationError
from pancheck.domain.models import DataQualityReport

logger = logging.getLogger(__name__)


def profile_records(raw_records: Iterable[Optional[str]]) -> DataQualityReport:
    """
    Profile raw records before cleaning.

    Counts nulls, blanks, values with leading/trailing whitespace and values
    that are not upper-case, and lists raw values occurring more than once.
    Duplicates are counted on the raw value, so ``"abc"`` and ``" ABC"`` are
    distinct here even though cleaning merges them.
    """
    report = DataQualityReport()
    counts: Counter = Counter()

    for record in raw_records:
        report.total_records += 1
        if record is None:
            report.missing += 1
            continue
        if not isinstance(record, str):
            raise ValidationError(
                f"Cannot profile a {type(record).__name__} record",
                field_name="record",
                field_value=record
            ).add_suggestion("Convert input values to text before profiling")
        counts[record] += 1
        trimmed = record.strip()
        if not trimmed:
            report.blank += 1
        if record != trimmed:
            report.padded += 1
        if record != record.upper():
            report.not_upper += 1

    report.distinct_values = len(counts)
    report.duplicates = {value: n for value, n in counts.items() if n > 1}

    logger.debug("Profiled %d raw records", report.total_records)
    return report
