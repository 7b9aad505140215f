# sitesync/utils/time_utils.py
"""
Timestamp helpers shared by the logbook services.
All stored timestamps are naive UTC with second precision.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time, truncated to whole seconds, without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def as_naive_utc(value: datetime) -> datetime:
    """Normalise an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def duration_minutes(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def format_duration(start: datetime, end: Optional[datetime]) -> str:
    """
    Human-readable visit length, e.g. "45 mins" or "2 hrs 5 mins".
    Active visits (no end) read "In progress".
    """
    if end is None:
        return "In progress"

    total_minutes = int((end - start).total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    mins = f"{minutes} min{'s' if minutes != 1 else ''}"
    if hours == 0:
        return mins
    return f"{hours} hr{'s' if hours != 1 else ''} {mins}"
