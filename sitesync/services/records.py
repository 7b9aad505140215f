# sitesync/services/records.py
"""
Plain domain records passed between the repository and the logbook services.
They are independent of SQLAlchemy so the same services run against the SQL
repository and the in-memory one.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_ENGINEER = "engineer"
ROLE_MEMBER = "member"

ROLES = (ROLE_OWNER, ROLE_ADMIN, ROLE_MANAGER, ROLE_ENGINEER, ROLE_MEMBER)


@dataclass
class SiteRecord:
    id: str
    name: str
    address: str
    qr_code: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class LogEntryRecord:
    id: str
    site_id: str
    site_name: str              # snapshot at check-in
    visitor_id: str
    visitor_name: str           # snapshot at check-in
    check_in_time: datetime
    purpose: str
    check_out_time: Optional[datetime] = None
    notes: Optional[str] = None
    work_completed: bool = False
    images: Optional[list[str]] = None

    @property
    def is_active(self) -> bool:
        return self.check_out_time is None

    def copy(self, **changes) -> "LogEntryRecord":
        return replace(self, **changes)


@dataclass
class CurrentUser:
    """Identity of the caller as resolved from the organization membership."""
    id: str
    name: str
    role: str
    email: Optional[str] = None
    organization_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role in (ROLE_OWNER, ROLE_ADMIN)

    @property
    def can_manage_team(self) -> bool:
        return self.role in (ROLE_OWNER, ROLE_ADMIN, ROLE_MANAGER)

    @property
    def can_manage_sites(self) -> bool:
        return self.is_admin


@dataclass
class VisitWindow:
    """Half-open check-in time range [start, end). Either bound may be open."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def contains(self, moment: datetime) -> bool:
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment >= self.end:
            return False
        return True


@dataclass
class UsageCounts:
    users: int = 0
    sites: int = 0
    api_calls: int = 0


@dataclass
class PlanLimits:
    users: int
    sites: int
    api_calls: int


@dataclass
class Plan:
    id: str
    name: str
    price: int
    interval: str
    limits: PlanLimits
    features: list[str] = field(default_factory=list)
    popular: bool = False
