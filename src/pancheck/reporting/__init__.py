"""Run summaries."""

from .summary import summarize, format_summary

__all__ = [
    "summarize",
    "format_summary",
]
