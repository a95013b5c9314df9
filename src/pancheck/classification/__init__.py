"""Cleaned PAN classification."""

from .classifier import PanClassifier, classify, classify_one

__all__ = [
    "PanClassifier",
    "classify",
    "classify_one",
]
