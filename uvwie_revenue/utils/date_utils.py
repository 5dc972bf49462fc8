"""Date manipulation utilities"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

ONE_DAY = timedelta(days=1)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_between_ceil(start: datetime, end: datetime) -> int:
    """Whole days from start to end, any part day counting as a full day (may be negative)"""
    return math.ceil((as_utc(end) - as_utc(start)) / ONE_DAY)


def add_years(from_date: datetime, years: int) -> datetime:
    """Same calendar day `years` later; 29 February falls back to 28 February"""
    try:
        return from_date.replace(year=from_date.year + years)
    except ValueError:
        return from_date.replace(year=from_date.year + years, day=28)
