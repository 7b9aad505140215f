# sitesync/schemas/log_entry.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from sitesync.services.records import LogEntryRecord
from sitesync.utils.time_utils import format_duration


class CheckInRequest(BaseModel):
    qr_code: str
    purpose: str
    notes: Optional[str] = None


class CheckOutRequest(BaseModel):
    work_completed: bool = True
    notes: Optional[str] = None
    images: Optional[list[str]] = None


class LogEntryOut(BaseModel):
    id: str
    site_id: str
    site_name: str
    visitor_id: str
    visitor_name: str
    check_in_time: datetime
    check_out_time: Optional[datetime]
    purpose: str
    notes: Optional[str]
    work_completed: bool
    images: Optional[list[str]]
    status: str                 # active | completed
    duration: str               # "In progress" | "1 hr 5 mins"


def log_entry_out(entry: LogEntryRecord) -> LogEntryOut:
    return LogEntryOut(
        id=entry.id,
        site_id=entry.site_id,
        site_name=entry.site_name,
        visitor_id=entry.visitor_id,
        visitor_name=entry.visitor_name,
        check_in_time=entry.check_in_time,
        check_out_time=entry.check_out_time,
        purpose=entry.purpose,
        notes=entry.notes,
        work_completed=entry.work_completed,
        images=entry.images,
        status="active" if entry.is_active else "completed",
        duration=format_duration(entry.check_in_time, entry.check_out_time),
    )
