# sitesync/services/visit_service.py
"""
Visit lifecycle: check-in → check-out.

How it works:
  - Engineer scans the site QR code → check_in() resolves the token, snapshots
    the site and visitor names and appends an active entry (check_out_time = None)
  - check_out() completes the entry exactly once; a repeated check-out is
    rejected with AlreadyCheckedOut, never silently accepted
  - The write goes through replace_log_entry(only_if_active=True) so a
    concurrent check-out that already landed is detected at the store
  - A user may hold several active visits at once (same or different sites)

All functions are synchronous and only touch the repository they are given.
"""

import uuid
from datetime import datetime
from typing import Optional

from sitesync.services.errors import (
    AlreadyCheckedOut, EntryNotFound, InvalidInput, PermissionDenied, SiteNotFound,
)
from sitesync.services.records import CurrentUser, LogEntryRecord
from sitesync.services.repository import LogbookRepository
from sitesync.utils.time_utils import as_naive_utc, utcnow
from sitesync.utils.logger import get_logger

logger = get_logger(__name__)


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    return text or None


def check_in(
    repo: LogbookRepository,
    qr_code: str,
    user: CurrentUser,
    purpose: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> LogEntryRecord:
    """Create an active log entry for `user` at the site identified by `qr_code`."""
    token = (qr_code or "").strip()
    if not token:
        raise InvalidInput("QR code is required")

    purpose = (purpose or "").strip()
    if not purpose:
        raise InvalidInput("Purpose of visit is required")

    site = repo.find_site_by_qr_code(token)
    if site is None:
        logger.warning(f"[CHECK-IN] Unknown QR code {token!r} scanned by {user.id}")
        raise SiteNotFound("Invalid QR code. Site not found.")

    entry = LogEntryRecord(
        id=str(uuid.uuid4()),
        site_id=site.id,
        site_name=site.name,
        visitor_id=user.id,
        visitor_name=user.name,
        check_in_time=as_naive_utc(now).replace(microsecond=0) if now else utcnow(),
        purpose=purpose,
        notes=_clean(notes),
        work_completed=False,
    )
    repo.append_log_entry(entry)
    logger.info(f"[CHECK-IN] {user.name} @ {site.name} | entry={entry.id} | purpose={purpose!r}")
    return entry


def check_out(
    repo: LogbookRepository,
    entry_id: str,
    work_completed: bool,
    notes: Optional[str] = None,
    images: Optional[list[str]] = None,
    now: Optional[datetime] = None,
) -> LogEntryRecord:
    """
    Complete an active entry. Notes replace the check-in notes when given;
    image references are appended to any already attached.
    """
    entry = repo.find_log_entry_by_id(entry_id)
    if entry is None:
        raise EntryNotFound(f"Log entry {entry_id} not found")
    if not entry.is_active:
        logger.warning(f"[CHECK-OUT] Entry {entry_id} already checked out at {entry.check_out_time}")
        raise AlreadyCheckedOut(f"Log entry {entry_id} is already checked out")

    check_out_time = as_naive_utc(now).replace(microsecond=0) if now else utcnow()
    if check_out_time < entry.check_in_time:
        raise InvalidInput("Check-out time cannot be earlier than check-in time")

    attached = list(entry.images or []) + [ref for ref in images or [] if ref]
    completed = entry.copy(
        check_out_time=check_out_time,
        work_completed=bool(work_completed),
        notes=_clean(notes) if notes is not None else entry.notes,
        images=attached or None,
    )

    if not repo.replace_log_entry(completed, only_if_active=True):
        # Lost the race against another check-out, or the entry vanished meanwhile
        if repo.find_log_entry_by_id(entry_id) is None:
            raise EntryNotFound(f"Log entry {entry_id} not found")
        logger.warning(f"[CHECK-OUT] Concurrent check-out detected for entry {entry_id}")
        raise AlreadyCheckedOut(f"Log entry {entry_id} is already checked out")

    minutes = int((check_out_time - entry.check_in_time).total_seconds() // 60)
    logger.info(
        f"[CHECK-OUT] {entry.visitor_name} @ {entry.site_name} | entry={entry_id} "
        f"| {minutes} min | work_completed={completed.work_completed}"
    )
    return completed


def get_entry(repo: LogbookRepository, entry_id: str) -> LogEntryRecord:
    entry = repo.find_log_entry_by_id(entry_id)
    if entry is None:
        raise EntryNotFound(f"Log entry {entry_id} not found")
    return entry


def delete_entry(repo: LogbookRepository, entry_id: str, user: CurrentUser) -> None:
    """Maintenance primitive — admins only. Not part of the normal visit flow."""
    if not user.is_admin:
        raise PermissionDenied("Only administrators can delete log entries")
    if not repo.delete_log_entry(entry_id):
        raise EntryNotFound(f"Log entry {entry_id} not found")
    logger.warning(f"[LOGBOOK] Entry {entry_id} deleted by {user.name}")
