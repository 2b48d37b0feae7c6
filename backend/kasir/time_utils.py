from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union


def now() -> datetime:
    """Server-side 'now' in local wall-clock time (naive)."""
    return datetime.now()


def start_of_day(value: Union[date, datetime]) -> datetime:
    """Midnight at the start of the given calendar day (naive)."""
    return datetime(value.year, value.month, value.day)


def day_bounds(value: Union[date, datetime]) -> tuple[datetime, datetime]:
    """Half-open [start-of-day, start-of-next-day) bounds for a calendar day."""
    start = start_of_day(value)
    return start, start + timedelta(days=1)


def to_datetime(value: Union[date, datetime]) -> datetime:
    """Promote a date to midnight; pass datetimes through unchanged."""
    if isinstance(value, datetime):
        return value
    return start_of_day(value)


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a 'YYYY-MM-DD' calendar date.

    - None / "" -> None
    - anything else that is not a strict ISO date raises ValueError
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    return datetime.strptime(s, "%Y-%m-%d").date()


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """Serializes datetime to ISO-8601 (seconds precision)."""
    if dt is None:
        return None
    return dt.replace(microsecond=0).isoformat()
