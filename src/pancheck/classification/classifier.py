"""Assigns a Valid/Invalid status to every cleaned PAN."""
import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Dict, Iterable, List

from pancheck.domain.models import ClassificationResult, Status
from pancheck.domain.exceptions import (
    BatchProcessingError,
    InternalConsistencyError,
    ParameterValidationError,
)
from pancheck.utils.itertools import chunked
from pancheck.validation.format import format_violations

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 2000
DEFAULT_PARALLEL_THRESHOLD = 50_000


def classify_one(value: str) -> ClassificationResult:
    """Classify a single cleaned identifier."""
    violations = tuple(format_violations(value))
    status = Status.INVALID if violations else Status.VALID
    return ClassificationResult(pan_number=value, status=status, violations=violations)


def _classify_chunk(values: List[str]) -> List[ClassificationResult]:
    # module level so worker processes can unpickle it
    return [classify_one(v) for v in values]


class PanClassifier:
    """
    Classifies a cleaned identifier set.

    Each entry is classified on its own, so large sets can be split into
    chunks and fanned out to worker processes. Results are keyed by value and
    carry no ordering guarantee.
    """

    def __init__(
        self,
        max_workers: int = 1,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD,
    ):
        if max_workers <= 0:
            raise ParameterValidationError(
                "max_workers must be positive",
                parameter_name="max_workers",
                parameter_value=max_workers,
                expected_type="positive integer"
            )
        if chunk_size <= 0:
            raise ParameterValidationError(
                "chunk_size must be positive",
                parameter_name="chunk_size",
                parameter_value=chunk_size,
                expected_type="positive integer"
            )
        if parallel_threshold < 0:
            raise ParameterValidationError(
                "parallel_threshold must not be negative",
                parameter_name="parallel_threshold",
                parameter_value=parallel_threshold,
                expected_type="non-negative integer"
            )
        self.max_workers = max_workers
        self.chunk_size = chunk_size
        self.parallel_threshold = parallel_threshold

    def results(self, cleaned: Iterable[str]) -> Dict[str, ClassificationResult]:
        """Classify every entry, returning value -> ClassificationResult."""
        values = sorted(set(cleaned))

        if self._use_workers(len(values)):
            classified = self._classify_parallel(values)
        else:
            classified = _classify_chunk(values)

        out = {r.pan_number: r for r in classified}
        if len(out) != len(values):
            raise InternalConsistencyError(
                "Classification count does not match cleaned set size",
                expected=len(values),
                actual=len(out)
            )
        return out

    def classify(self, cleaned: Iterable[str]) -> Dict[str, Status]:
        """Classify every entry, returning value -> Status."""
        return {value: r.status for value, r in self.results(cleaned).items()}

    def _use_workers(self, n_values: int) -> bool:
        return self.max_workers > 1 and n_values >= max(self.parallel_threshold, 1)

    def _classify_parallel(self, values: List[str]) -> List[ClassificationResult]:
        chunks = list(chunked(values, self.chunk_size))
        logger.info(
            "Classifying %d entries in %d chunks with %d workers",
            len(values), len(chunks), self.max_workers
        )
        out: List[ClassificationResult] = []
        try:
            with ProcessPoolExecutor(max_workers=self.max_workers) as pool:
                for part in pool.map(_classify_chunk, chunks):
                    out.extend(part)
        except Exception as e:
            raise BatchProcessingError(
                f"Parallel classification failed: {e}",
                batch_size=len(values)
            ).add_context('chunk_size', self.chunk_size) from e
        return out


def classify(cleaned: Iterable[str], **kwargs) -> Dict[str, Status]:
    """Classify a cleaned set with a throwaway PanClassifier."""
    return PanClassifier(**kwargs).classify(cleaned)
