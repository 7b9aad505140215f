# sitesync/services/logbook_query.py
"""
Logbook list view: status filter, free-text search and sorting.

Pure functions over a list of LogEntryRecord — the input list is never mutated
and the same input + options always yields the same order.
"""

from datetime import datetime
from typing import Iterable, Optional

from sitesync.services.errors import InvalidInput
from sitesync.services.records import LogEntryRecord

STATUS_ALL = "all"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUSES = (STATUS_ALL, STATUS_ACTIVE, STATUS_COMPLETED)

SORT_ASC = "asc"
SORT_DESC = "desc"

# Fields that can be used as a sort key; timestamps compare by ISO text
SORT_KEYS = (
    "id", "site_id", "site_name", "visitor_id", "visitor_name",
    "check_in_time", "check_out_time", "purpose", "notes",
)
DEFAULT_SORT_KEY = "check_in_time"
DEFAULT_SORT_DIRECTION = SORT_DESC

SEARCH_FIELDS = ("site_name", "visitor_name", "purpose", "notes")


def filter_by_status(entries: Iterable[LogEntryRecord], status: str) -> list[LogEntryRecord]:
    if status not in STATUSES:
        raise InvalidInput(f"Unknown status filter {status!r} — expected one of {', '.join(STATUSES)}")
    if status == STATUS_ACTIVE:
        return [e for e in entries if e.check_out_time is None]
    if status == STATUS_COMPLETED:
        return [e for e in entries if e.check_out_time is not None]
    return list(entries)


def matches_query(entry: LogEntryRecord, query: str) -> bool:
    """Case-insensitive substring match across site, visitor, purpose and notes."""
    needle = query.lower()
    for field in SEARCH_FIELDS:
        value = getattr(entry, field)
        if value and needle in value.lower():
            return True
    return False


def search(entries: Iterable[LogEntryRecord], query: Optional[str]) -> list[LogEntryRecord]:
    query = (query or "").strip()
    if not query:
        return list(entries)
    return [e for e in entries if matches_query(e, query)]


def _sort_value(entry: LogEntryRecord, key: str) -> str:
    value = getattr(entry, key)
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def sort_entries(
    entries: Iterable[LogEntryRecord],
    key: str = DEFAULT_SORT_KEY,
    direction: str = DEFAULT_SORT_DIRECTION,
) -> list[LogEntryRecord]:
    """Stable sort; missing values sort as the empty string."""
    if key not in SORT_KEYS:
        raise InvalidInput(f"Cannot sort by {key!r}")
    if direction not in (SORT_ASC, SORT_DESC):
        raise InvalidInput(f"Sort direction must be '{SORT_ASC}' or '{SORT_DESC}'")
    return sorted(entries, key=lambda e: _sort_value(e, key), reverse=direction == SORT_DESC)


def list_entries(
    entries: Iterable[LogEntryRecord],
    status: str = STATUS_ALL,
    query: Optional[str] = None,
    sort_key: str = DEFAULT_SORT_KEY,
    direction: str = DEFAULT_SORT_DIRECTION,
    site_id: Optional[str] = None,
    visitor_id: Optional[str] = None,
) -> list[LogEntryRecord]:
    """Status filter → optional site / visitor restriction → search → sort."""
    result = filter_by_status(entries, status)
    if site_id:
        result = [e for e in result if e.site_id == site_id]
    if visitor_id:
        result = [e for e in result if e.visitor_id == visitor_id]
    result = search(result, query)
    return sort_entries(result, sort_key, direction)
