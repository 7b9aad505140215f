# sitesync/models/log_entry.py
"""
Logbook table — one row per site visit.
Created at check-in (check_out_time NULL = active visit), completed once at check-out.
site_name and visitor_name are snapshots taken at check-in and are never
rewritten when the site or user is renamed. site_id is intentionally not a
foreign key: deleting a site keeps its history.
"""

from sqlalchemy import Column, String, DateTime, Boolean, Text, JSON, ForeignKey
from sitesync.database import Base


class LogEntry(Base):
    __tablename__ = "log_entries"

    id = Column(String(36), primary_key=True)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    site_id = Column(String(36), nullable=False, index=True)
    site_name = Column(String(200), nullable=False)
    visitor_id = Column(String(36), nullable=False, index=True)
    visitor_name = Column(String(200), nullable=False)
    check_in_time = Column(DateTime, nullable=False, index=True)
    check_out_time = Column(DateTime, index=True)
    purpose = Column(Text, nullable=False)
    notes = Column(Text)
    work_completed = Column(Boolean, default=False, nullable=False)
    images = Column(JSON)                    # list of image references / URLs

    def __repr__(self):
        state = "active" if self.check_out_time is None else "completed"
        return f"<LogEntry {self.id} site={self.site_name} visitor={self.visitor_name} {state}>"
