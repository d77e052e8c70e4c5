"""
Date handling utilities for settlement and tenor computations.

Trade timestamps are authoritative for the trading day: a leg executed at
10:00 -03:00 belongs to that local date, so dates are taken from the
timestamp's own zone rather than converted to UTC first.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[date, datetime, str]

BROKER_TIMESTAMP_FORMAT = "%Y%m%d-%H:%M:%S.%f%z"


def parse_timestamp(value: Union[datetime, str]) -> datetime:
    """
    Parse an execution timestamp.

    Accepts ISO-8601 (``2025-10-17T10:00:00-03:00``, trailing ``Z`` allowed)
    and the broker format ``20251017-10:00:00.000-0300``. Naive values are
    assumed to be UTC.

    Raises:
        ValueError: if the value matches neither format
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        try:
            parsed = datetime.strptime(text, BROKER_TIMESTAMP_FORMAT)
        except ValueError:
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_date(value: DateLike) -> date:
    """Coerce a date, datetime or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return parse_timestamp(text).date()


def calendar_days_between(start: DateLike, end: DateLike) -> int:
    """
    Whole calendar days from ``start`` to ``end``.

    Args:
        start: Start date
        end: End date

    Returns:
        Day count, negative when end precedes start
    """
    return (to_date(end) - to_date(start)).days


def earliest_date(values: list[datetime], fallback: Optional[date] = None) -> Optional[date]:
    """
    Earliest calendar date among timestamps, ``fallback`` when empty.

    Naive values are read as UTC so they compare with zone-aware ones; the
    date is taken in the earliest timestamp's own zone.
    """
    if not values:
        return fallback
    return min(parse_timestamp(value) for value in values).date()
