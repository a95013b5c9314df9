"""Raw input processing: cleaning and profiling."""

from .cleaner import clean, normalize
from .quality import profile_records

__all__ = [
    "clean",
    "normalize",
    "profile_records",
]
