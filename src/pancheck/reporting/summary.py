"""Summary counts over a classified dataset."""
import logging
from typing import Mapping, Union

from pancheck.domain.models import ClassificationResult, Status, SummaryCounts
from pancheck.domain.exceptions import InternalConsistencyError, ParameterValidationError

logger = logging.getLogger(__name__)


def _status_of(entry: Union[Status, ClassificationResult]) -> Status:
    if isinstance(entry, ClassificationResult):
        return entry.status
    return entry


def summarize(
    total_raw_count: int,
    classifications: Mapping[str, Union[Status, ClassificationResult]],
) -> SummaryCounts:
    """
    Count valid and invalid entries and derive the missing/incomplete count.

    ``missing_or_incomplete`` is every raw record that never reached
    classification (null, blank or duplicate). A negative value means more
    entries were classified than were read, which is raised as an
    InternalConsistencyError rather than reported.
    """
    if total_raw_count < 0:
        raise ParameterValidationError(
            "total_raw_count must not be negative",
            parameter_name="total_raw_count",
            parameter_value=total_raw_count,
            expected_type="non-negative integer"
        )

    total_valid = 0
    total_invalid = 0
    for entry in classifications.values():
        if _status_of(entry) is Status.VALID:
            total_valid += 1
        else:
            total_invalid += 1

    missing = total_raw_count - (total_valid + total_invalid)
    if missing < 0:
        raise InternalConsistencyError(
            f"Classified {total_valid + total_invalid} entries from only {total_raw_count} raw records",
            expected=total_raw_count,
            actual=total_valid + total_invalid
        ).add_suggestion("Pass the raw record count, not the cleaned set size")

    counts = SummaryCounts(
        total_processed=total_raw_count,
        total_valid=total_valid,
        total_invalid=total_invalid,
        missing_or_incomplete=missing,
    )
    logger.debug("Summary: %s", counts.to_dict())
    return counts


def format_summary(counts: SummaryCounts) -> str:
    """Render counts as the fixed-width table printed by the CLI."""
    rows = [
        ("Total processed records", counts.total_processed),
        ("Total valid PANs", counts.total_valid),
        ("Total invalid PANs", counts.total_invalid),
        ("Missing/incomplete PANs", counts.missing_or_incomplete),
    ]
    width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label:<{width}}  {value:>10,}" for label, value in rows)
