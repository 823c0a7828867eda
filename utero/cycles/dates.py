"""Calendar-day arithmetic shared by the prediction engine and the calendar.

Everything in Utero works at day granularity.  Values may arrive as
``datetime`` (e.g. a wall-clock reading) or plain ``date``; ``start_of_day``
collapses both to a ``date`` so equality and ordering are safe.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

DATE_KEY_FORMAT = "%Y-%m-%d"

_ONE_DAY = timedelta(days=1)


def _as_datetime(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def start_of_day(value: date) -> date:
    """Drop any time-of-day component.

    Args:
        value: A ``date`` or ``datetime``.

    Returns:
        The calendar date the value falls on.
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def add_days(value: date, days: int) -> date:
    """Return a new value offset by ``days`` whole days (may be negative).

    Month and year boundaries roll over.  The input is never modified.
    """
    return value + timedelta(days=days)


def difference_in_days(d1: date, d2: date) -> int:
    """Whole-day span between two values, ignoring direction.

    The span is the ceiling of the elapsed time over one day, so two
    datetimes 25 hours apart are 2 days apart.  Normalize with
    ``start_of_day`` first when an exact calendar-day count matters.

    Args:
        d1: First date or datetime.
        d2: Second date or datetime.

    Returns:
        Non-negative day count; ``difference_in_days(a, b) == difference_in_days(b, a)``.
    """
    elapsed = abs(_as_datetime(d2) - _as_datetime(d1))
    return math.ceil(elapsed / _ONE_DAY)


def date_key(value: date) -> str:
    """Format a value as the ``YYYY-MM-DD`` key used by stored logs."""
    return start_of_day(value).strftime(DATE_KEY_FORMAT)


def parse_date_key(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` key.

    Raises:
        ValueError: If ``text`` is not a valid ISO calendar date.
    """
    if not isinstance(text, str):
        raise ValueError(f"Date key must be a string, got {text!r}")
    return datetime.strptime(text.strip(), DATE_KEY_FORMAT).date()
