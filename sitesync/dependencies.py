# sitesync/dependencies.py
"""
FastAPI dependencies for caller identity and the organization-scoped repository.

Every logbook request carries:
  X-Organization-Id — the tenant the request acts on (missing → NoOrganizationSelected)
  X-User-Id         — the authenticated user; name and role come from the membership row
"""

from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from sitesync.database import get_db
from sitesync.services.records import CurrentUser
from sitesync.services.repository import SqlLogbookRepository
from sitesync.services.team_service import resolve_current_user


def get_current_user(
    x_organization_id: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> CurrentUser:
    return resolve_current_user(db, x_organization_id, x_user_id)


def get_repository(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SqlLogbookRepository:
    return SqlLogbookRepository(db, user.organization_id)
