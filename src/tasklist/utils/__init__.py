"""Utility helpers for tasklist."""

from .datetime import (
    DEADLINE_FORMAT,
    deadline_sort_key,
    format_deadline,
    is_valid_deadline,
    parse_deadline,
)

__all__ = [
    "DEADLINE_FORMAT",
    "deadline_sort_key",
    "format_deadline",
    "is_valid_deadline",
    "parse_deadline",
]
