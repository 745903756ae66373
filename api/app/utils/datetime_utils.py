"""Datetime helpers for the API layer.

TIMESTAMP CONVENTION:
All timestamps are stored and returned as timezone-aware UTC (ISO 8601).
Naive datetimes reaching the API are interpreted as UTC, never as local time.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone


def now_utc() -> datetime:
    """Get the current time in UTC, timezone-aware."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: datetime | date | str | None) -> datetime | None:
    """
    Coerce a stored timestamp into an aware UTC datetime.

    Accepts datetimes, plain dates (read as midnight UTC), ISO-8601 strings
    (including a trailing "Z") and None.
    Returns None for empty or unparseable strings.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def elapsed_whole_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, floored (negative if end precedes start)."""
    return math.floor((ensure_utc(end) - ensure_utc(start)).total_seconds())

