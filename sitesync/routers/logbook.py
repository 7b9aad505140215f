# sitesync/routers/logbook.py
"""Logbook endpoints — filtered/sorted list, single entry, maintenance delete."""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sitesync.config import settings
from sitesync.dependencies import get_current_user, get_repository
from sitesync.schemas.log_entry import LogEntryOut, log_entry_out
from sitesync.services import logbook_query, visit_service
from sitesync.services.records import CurrentUser
from sitesync.services.repository import LogbookRepository

router = APIRouter()


@router.get("/logbook", response_model=list[LogEntryOut], summary="Search the logbook")
def list_logbook(
    status: str = logbook_query.STATUS_ALL,
    q: Optional[str] = None,
    sort: str = logbook_query.DEFAULT_SORT_KEY,
    direction: str = logbook_query.DEFAULT_SORT_DIRECTION,
    site_id: Optional[str] = None,
    visitor_id: Optional[str] = None,
    limit: int = Query(settings.DEFAULT_LIST_LIMIT, ge=1, le=5000),
    repo: LogbookRepository = Depends(get_repository),
):
    """
    status: all | active | completed
    q: case-insensitive search over site, visitor, purpose and notes
    sort / direction: any entry field, asc | desc (default newest check-in first)
    """
    entries = logbook_query.list_entries(
        repo.list_log_entries(),
        status=status,
        query=q,
        sort_key=sort,
        direction=direction,
        site_id=site_id,
        visitor_id=visitor_id,
    )
    return [log_entry_out(e) for e in entries[:limit]]


@router.get("/logbook/{entry_id}", response_model=LogEntryOut, summary="Get one log entry")
def get_entry(entry_id: str, repo: LogbookRepository = Depends(get_repository)):
    return log_entry_out(visit_service.get_entry(repo, entry_id))


@router.delete("/logbook/{entry_id}", summary="Delete a log entry (admin maintenance)")
def delete_entry(
    entry_id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: LogbookRepository = Depends(get_repository),
):
    visit_service.delete_entry(repo, entry_id, user)
    return {"id": entry_id, "status": "deleted"}
