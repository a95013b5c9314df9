"""Core domain models for PAN validation."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Dict, Any, Tuple

class Status(Enum):
    """Classification outcome; values match the stored status labels."""
    VALID = "Valid PAN"
    INVALID = "Invalid PAN"

    @classmethod
    def from_label(cls, label: str) -> "Status":
        for member in cls:
            if member.value == label:
                return member
        raise ValueError(f"Unknown status label: {label!r}")

@dataclass(frozen=True)
class ClassificationResult:
    """One cleaned identifier and its status."""
    pan_number: str
    status: Status
    violations: Tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.status is Status.VALID

    def to_row(self, include_details: bool = False) -> Tuple[str, str, Optional[str]]:
        """Row tuple for the classifications table."""
        details = ",".join(self.violations) if include_details and self.violations else None
        return (self.pan_number, self.status.value, details)

@dataclass(frozen=True)
class SummaryCounts:
    """Count report over one pipeline run."""
    total_processed: int
    total_valid: int
    total_invalid: int
    missing_or_incomplete: int

    @property
    def total_classified(self) -> int:
        return self.total_valid + self.total_invalid

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

@dataclass
class DataQualityReport:
    """Profile of the raw input before cleaning."""
    total_records: int = 0
    missing: int = 0
    blank: int = 0
    padded: int = 0
    not_upper: int = 0
    distinct_values: int = 0
    duplicates: Dict[str, int] = field(default_factory=dict)

    @property
    def duplicate_records(self) -> int:
        """Number of raw records beyond the first occurrence of each duplicated value."""
        return sum(count - 1 for count in self.duplicates.values())

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["duplicate_records"] = self.duplicate_records
        return out
