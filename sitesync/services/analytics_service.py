# sitesync/services/analytics_service.py
"""
Dashboard analytics over the organization's logbook.

  - total_visits          entries checked in inside the window (all entries when no window)
  - active_visits         entries still checked in — always "now", the window never applies
  - visits_by_day         (UTC ISO date, count) per date present, no zero-filling;
                          optionally narrowed further by `day_window`
  - visits_by_site/_user  (snapshot name, count) in order of first appearance
  - avg_visit_duration    mean minutes over completed entries, 0 when there are none

Counts are exact; calling summarize() twice on the same input gives the same result.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, Optional

from sitesync.services.records import LogEntryRecord, SiteRecord, VisitWindow
from sitesync.utils.time_utils import duration_minutes, utcnow


@dataclass
class AnalyticsSummary:
    total_visits: int
    active_visits: int
    total_sites: int
    total_users: int
    avg_visit_duration: float
    visits_by_day: list[tuple[str, int]] = field(default_factory=list)
    visits_by_site: list[tuple[str, int]] = field(default_factory=list)
    visits_by_user: list[tuple[str, int]] = field(default_factory=list)


def last_days_window(days: int) -> VisitWindow:
    """Window covering the last `days` days up to now."""
    return VisitWindow(start=utcnow() - timedelta(days=days))


def count_by(values: Iterable[str]) -> list[tuple[str, int]]:
    """Group-and-count keeping the order in which each value first appears."""
    counts: dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return list(counts.items())


def average_duration_minutes(entries: Iterable[LogEntryRecord]) -> float:
    durations = [
        duration_minutes(e.check_in_time, e.check_out_time)
        for e in entries
        if e.check_out_time is not None
    ]
    if not durations:
        return 0
    return round(sum(durations) / len(durations), 1)


def summarize(
    entries: list[LogEntryRecord],
    sites: list[SiteRecord],
    window: Optional[VisitWindow] = None,
    total_users: Optional[int] = None,
    day_window: Optional[VisitWindow] = None,
) -> AnalyticsSummary:
    """
    `total_users` is the organization's member count when the caller has it;
    otherwise the number of distinct visitors in the logbook is used.

    `day_window` further limits visits_by_day only (the dashboard chart shows
    the last N days while the totals stay all-time).
    """
    in_window = [e for e in entries if window is None or window.contains(e.check_in_time)]
    by_day = [e for e in in_window if day_window is None or day_window.contains(e.check_in_time)]

    if total_users is None:
        total_users = len({e.visitor_id for e in entries})

    return AnalyticsSummary(
        total_visits=len(in_window),
        active_visits=sum(1 for e in entries if e.check_out_time is None),
        total_sites=len(sites),
        total_users=total_users,
        avg_visit_duration=average_duration_minutes(in_window),
        visits_by_day=count_by(e.check_in_time.date().isoformat() for e in by_day),
        visits_by_site=count_by(e.site_name for e in in_window),
        visits_by_user=count_by(e.visitor_name for e in in_window),
    )
