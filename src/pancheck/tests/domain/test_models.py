import dataclasses

import pytest

from pancheck.domain.models import (
    ClassificationResult,
    DataQualityReport,
    Status,
    SummaryCounts,
)


class TestStatus:
    def test_labels(self):
        assert Status.VALID.value == "Valid PAN"
        assert Status.INVALID.value == "Invalid PAN"

    def test_from_label(self):
        assert Status.from_label("Valid PAN") is Status.VALID
        assert Status.from_label("Invalid PAN") is Status.INVALID

    def test_unknown_label(self):
        with pytest.raises(ValueError):
            Status.from_label("Missing")


class TestClassificationResult:
    def test_row_without_details(self):
        result = ClassificationResult("AB1234", Status.INVALID, ("length",))
        assert result.to_row() == ("AB1234", "Invalid PAN", None)

    def test_row_with_details(self):
        result = ClassificationResult("AABCD1234Z", Status.INVALID, ("adjacent_repetition", "sequential_digits"))
        assert result.to_row(include_details=True) == (
            "AABCD1234Z", "Invalid PAN", "adjacent_repetition,sequential_digits"
        )

    def test_valid_row_has_no_details(self):
        result = ClassificationResult("KXRPT2045M", Status.VALID)
        assert result.to_row(include_details=True) == ("KXRPT2045M", "Valid PAN", None)
        assert result.is_valid

    def test_frozen(self):
        result = ClassificationResult("KXRPT2045M", Status.VALID)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.status = Status.INVALID


class TestSummaryCounts:
    def test_total_classified(self):
        assert SummaryCounts(10, 3, 4, 3).total_classified == 7

    def test_to_dict(self):
        assert SummaryCounts(4, 0, 1, 3).to_dict() == {
            "total_processed": 4,
            "total_valid": 0,
            "total_invalid": 1,
            "missing_or_incomplete": 3,
        }


class TestDataQualityReport:
    def test_defaults(self):
        report = DataQualityReport()
        assert report.total_records == 0
        assert report.duplicates == {}
        assert report.duplicate_records == 0

    def test_duplicate_records(self):
        report = DataQualityReport(duplicates={"A": 3, "B": 2})
        assert report.duplicate_records == 3
