"""
Time Utilities

Everything is stored and compared in UTC. Some drivers (SQLite) hand back
naive datetimes, so values read from the database go through as_utc()
before being compared with utc_now().
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes, convert aware ones."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def candidate_dates(today: date, lookback_days: int) -> List[date]:
    """Today first, then each prior day up to lookback_days back."""
    return [today - timedelta(days=offset) for offset in range(lookback_days + 1)]
