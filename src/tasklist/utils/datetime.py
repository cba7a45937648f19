"""Deadline helpers.

Deadlines are stored as plain ISO calendar dates (``YYYY-MM-DD``). An empty
string means "no deadline". These helpers keep parsing and ordering rules in
one place so the store, the CLI and the tests agree on them.
"""

from datetime import date, datetime
from typing import Optional, Tuple


DEADLINE_FORMAT = "%Y-%m-%d"


def parse_deadline(value: Optional[str]) -> Optional[date]:
    """Parse a deadline string into a date.

    Args:
        value: ISO calendar date string, empty string or None

    Returns:
        The parsed date, or None when the value is empty or unparsable
    """
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), DEADLINE_FORMAT).date()
    except ValueError:
        return None


def is_valid_deadline(value: Optional[str]) -> bool:
    """Return True if value is empty or a parsable ISO date."""
    if not value:
        return True
    return parse_deadline(value) is not None


def deadline_sort_key(value: Optional[str]) -> Tuple[int, date]:
    """Sort key placing dated deadlines first, chronologically.

    Empty and unparsable deadlines compare greater than any real date and
    equal to each other, so a stable sort keeps their relative order.
    """
    parsed = parse_deadline(value)
    if parsed is None:
        return (1, date.max)
    return (0, parsed)


def format_deadline(value: Optional[str]) -> str:
    """Normalize a deadline for storage.

    Args:
        value: User supplied deadline (may have surrounding whitespace)

    Returns:
        ``YYYY-MM-DD`` string, or an empty string for no deadline

    Raises:
        ValueError: If the value is not empty and not an ISO date
    """
    if not value or not value.strip():
        return ""
    parsed = parse_deadline(value)
    if parsed is None:
        raise ValueError(f"Invalid deadline '{value}', expected YYYY-MM-DD")
    return parsed.strftime(DEADLINE_FORMAT)
