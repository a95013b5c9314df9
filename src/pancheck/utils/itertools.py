"""Iterator helpers for chunked writes and worker fan-out."""

from itertools import islice
from typing import Iterable, Iterator, List, TypeVar

T = TypeVar('T')

def chunked(items: Iterable[T], size: int) -> Iterator[List[T]]:
    """
    Yield consecutive lists of at most ``size`` items.

    The last chunk may be shorter; an empty input yields nothing.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    it = iter(items)
    while True:
        batch = list(islice(it, size))
        if not batch:
            return
        yield batch
