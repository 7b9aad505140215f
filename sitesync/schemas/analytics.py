# sitesync/schemas/analytics.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class DayCount(BaseModel):
    date: str
    count: int


class SiteCount(BaseModel):
    site_name: str
    count: int


class UserCount(BaseModel):
    user_name: str
    count: int


class AnalyticsOut(BaseModel):
    total_visits: int
    active_visits: int
    total_sites: int
    total_users: int
    avg_visit_duration: float          # minutes
    visits_by_day: list[DayCount]
    visits_by_site: list[SiteCount]
    visits_by_user: list[UserCount]
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
