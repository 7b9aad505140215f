# sitesync/routers/analytics.py
"""Dashboard analytics — visit counts, groupings and average duration."""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sitesync.config import settings
from sitesync.database import get_db
from sitesync.dependencies import get_current_user, get_repository
from sitesync.schemas.analytics import AnalyticsOut, DayCount, SiteCount, UserCount
from sitesync.services.analytics_service import last_days_window, summarize
from sitesync.services.errors import InvalidInput
from sitesync.services.records import CurrentUser, VisitWindow
from sitesync.services.repository import LogbookRepository
from sitesync.services.team_service import count_members
from sitesync.utils.time_utils import as_naive_utc

router = APIRouter()


@router.get("/analytics/summary", response_model=AnalyticsOut, summary="Visit analytics")
def get_summary(
    days: Optional[int] = Query(None, ge=1, le=3650),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    user: CurrentUser = Depends(get_current_user),
    repo: LogbookRepository = Depends(get_repository),
    db: Session = Depends(get_db),
):
    """
    Window selection: `days` (last N days) or explicit `start` / `end`.
    With neither, every entry is counted and visits_by_day covers the last
    ANALYTICS_DEFAULT_DAYS days. Active visits ignore the window.
    """
    if days is not None and (start or end):
        raise InvalidInput("Use either days or start/end, not both")

    window = None
    day_window = None
    if days is not None:
        window = last_days_window(days)
    elif start or end:
        window = VisitWindow(
            start=as_naive_utc(start) if start else None,
            end=as_naive_utc(end) if end else None,
        )
        if window.start and window.end and window.end < window.start:
            raise InvalidInput("Window end is before its start")
    else:
        day_window = last_days_window(settings.ANALYTICS_DEFAULT_DAYS)

    summary = summarize(
        repo.list_log_entries(),
        repo.list_sites(),
        window=window,
        total_users=count_members(db, user.organization_id),
        day_window=day_window,
    )
    return AnalyticsOut(
        total_visits=summary.total_visits,
        active_visits=summary.active_visits,
        total_sites=summary.total_sites,
        total_users=summary.total_users,
        avg_visit_duration=summary.avg_visit_duration,
        visits_by_day=[DayCount(date=d, count=c) for d, c in summary.visits_by_day],
        visits_by_site=[SiteCount(site_name=s, count=c) for s, c in summary.visits_by_site],
        visits_by_user=[UserCount(user_name=u, count=c) for u, c in summary.visits_by_user],
        window_start=window.start if window else None,
        window_end=window.end if window else None,
    )
