# sitesync/routers/checkins.py
"""Visit lifecycle endpoints — check in by QR code, check out by entry id."""

from fastapi import APIRouter, Depends
from sitesync.dependencies import get_current_user, get_repository
from sitesync.schemas.log_entry import CheckInRequest, CheckOutRequest, LogEntryOut, log_entry_out
from sitesync.services import visit_service
from sitesync.services.records import CurrentUser
from sitesync.services.repository import LogbookRepository

router = APIRouter()


@router.post("/checkins", response_model=LogEntryOut, status_code=201, summary="Check in at a site")
def check_in(
    body: CheckInRequest,
    user: CurrentUser = Depends(get_current_user),
    repo: LogbookRepository = Depends(get_repository),
):
    """
    Creates an active log entry for the caller at the site the QR code belongs to.
    404 if the code does not resolve, 400 if the purpose is empty.
    """
    entry = visit_service.check_in(repo, body.qr_code, user, body.purpose, body.notes)
    return log_entry_out(entry)


@router.post("/checkins/{entry_id}/checkout", response_model=LogEntryOut, summary="Check out")
def check_out(
    entry_id: str,
    body: CheckOutRequest,
    repo: LogbookRepository = Depends(get_repository),
):
    """
    Completes an active entry. A second check-out of the same entry returns 409
    AlreadyCheckedOut.
    """
    entry = visit_service.check_out(
        repo, entry_id, body.work_completed, notes=body.notes, images=body.images,
    )
    return log_entry_out(entry)
