# sitesync/services/repository.py
"""
Persistence boundary for the logbook.

Services only talk to a LogbookRepository scoped to one organization:
  - SqlLogbookRepository       — SQLAlchemy session (production)
  - InMemoryLogbookRepository  — plain lists (tests, embedding, demo seeding)

Lookups return None when nothing matches; the services turn that into the
named SiteNotFound / EntryNotFound errors.

Check-out must be a compare-and-swap: replace_log_entry(entry, only_if_active=True)
only writes when the stored row still has no check_out_time, and reports
whether it did. Two racing check-outs therefore produce exactly one winner.
"""

from typing import Optional, Protocol
from sqlalchemy import update
from sqlalchemy.orm import Session

from sitesync.models.log_entry import LogEntry
from sitesync.models.site import Site
from sitesync.services.records import LogEntryRecord, SiteRecord


class LogbookRepository(Protocol):
    def list_sites(self) -> list[SiteRecord]: ...
    def find_site_by_id(self, site_id: str) -> Optional[SiteRecord]: ...
    def find_site_by_qr_code(self, token: str) -> Optional[SiteRecord]: ...
    def add_site(self, site: SiteRecord) -> None: ...
    def replace_site(self, site: SiteRecord) -> bool: ...
    def delete_site(self, site_id: str) -> bool: ...

    def list_log_entries(self) -> list[LogEntryRecord]: ...
    def find_log_entry_by_id(self, entry_id: str) -> Optional[LogEntryRecord]: ...
    def append_log_entry(self, entry: LogEntryRecord) -> None: ...
    def replace_log_entry(self, entry: LogEntryRecord, only_if_active: bool = False) -> bool: ...
    def delete_log_entry(self, entry_id: str) -> bool: ...


# ── In-memory ───────────────────────────────────────────────────────────────

class InMemoryLogbookRepository:
    """List-backed repository. Records are copied in and out so callers never share state."""

    def __init__(self, sites: Optional[list[SiteRecord]] = None,
                 entries: Optional[list[LogEntryRecord]] = None):
        self._sites: list[SiteRecord] = [_copy_site(s) for s in sites or []]
        self._entries: list[LogEntryRecord] = [e.copy() for e in entries or []]

    def list_sites(self) -> list[SiteRecord]:
        return [_copy_site(s) for s in self._sites]

    def find_site_by_id(self, site_id: str) -> Optional[SiteRecord]:
        for site in self._sites:
            if site.id == site_id:
                return _copy_site(site)
        return None

    def find_site_by_qr_code(self, token: str) -> Optional[SiteRecord]:
        for site in self._sites:
            if site.qr_code == token:
                return _copy_site(site)
        return None

    def add_site(self, site: SiteRecord) -> None:
        self._sites.append(_copy_site(site))

    def replace_site(self, site: SiteRecord) -> bool:
        for i, existing in enumerate(self._sites):
            if existing.id == site.id:
                self._sites[i] = _copy_site(site)
                return True
        return False

    def delete_site(self, site_id: str) -> bool:
        before = len(self._sites)
        self._sites = [s for s in self._sites if s.id != site_id]
        return len(self._sites) != before

    def list_log_entries(self) -> list[LogEntryRecord]:
        return [e.copy() for e in self._entries]

    def find_log_entry_by_id(self, entry_id: str) -> Optional[LogEntryRecord]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry.copy()
        return None

    def append_log_entry(self, entry: LogEntryRecord) -> None:
        self._entries.append(entry.copy())

    def replace_log_entry(self, entry: LogEntryRecord, only_if_active: bool = False) -> bool:
        for i, existing in enumerate(self._entries):
            if existing.id != entry.id:
                continue
            if only_if_active and not existing.is_active:
                return False
            self._entries[i] = entry.copy()
            return True
        return False

    def delete_log_entry(self, entry_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) != before


def _copy_site(site: SiteRecord) -> SiteRecord:
    return SiteRecord(**vars(site))


# ── SQLAlchemy ──────────────────────────────────────────────────────────────

class SqlLogbookRepository:
    """Repository over the sites / log_entries tables, filtered to one organization."""

    def __init__(self, db: Session, organization_id: str):
        self.db = db
        self.organization_id = organization_id

    # Sites
    def _site_query(self):
        return self.db.query(Site).filter(Site.organization_id == self.organization_id)

    def list_sites(self) -> list[SiteRecord]:
        return [site_to_record(s) for s in self._site_query().order_by(Site.name).all()]

    def find_site_by_id(self, site_id: str) -> Optional[SiteRecord]:
        row = self._site_query().filter(Site.id == site_id).first()
        return site_to_record(row) if row else None

    def find_site_by_qr_code(self, token: str) -> Optional[SiteRecord]:
        row = self._site_query().filter(Site.qr_code == token).first()
        return site_to_record(row) if row else None

    def add_site(self, site: SiteRecord) -> None:
        self.db.add(Site(
            id=site.id,
            organization_id=self.organization_id,
            name=site.name,
            address=site.address,
            qr_code=site.qr_code,
            created_by=site.created_by,
            created_at=site.created_at,
            updated_at=site.updated_at,
        ))
        self.db.commit()

    def replace_site(self, site: SiteRecord) -> bool:
        row = self._site_query().filter(Site.id == site.id).first()
        if not row:
            return False
        row.name = site.name
        row.address = site.address
        row.qr_code = site.qr_code
        row.updated_at = site.updated_at
        self.db.commit()
        return True

    def delete_site(self, site_id: str) -> bool:
        row = self._site_query().filter(Site.id == site_id).first()
        if not row:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    # Log entries
    def _entry_query(self):
        return self.db.query(LogEntry).filter(LogEntry.organization_id == self.organization_id)

    def list_log_entries(self) -> list[LogEntryRecord]:
        rows = self._entry_query().order_by(LogEntry.check_in_time, LogEntry.id).all()
        return [entry_to_record(r) for r in rows]

    def find_log_entry_by_id(self, entry_id: str) -> Optional[LogEntryRecord]:
        row = self._entry_query().filter(LogEntry.id == entry_id).first()
        return entry_to_record(row) if row else None

    def append_log_entry(self, entry: LogEntryRecord) -> None:
        self.db.add(LogEntry(organization_id=self.organization_id, **_entry_columns(entry)))
        self.db.commit()

    def replace_log_entry(self, entry: LogEntryRecord, only_if_active: bool = False) -> bool:
        values = _entry_columns(entry)
        values.pop("id")
        stmt = update(LogEntry).where(
            LogEntry.id == entry.id,
            LogEntry.organization_id == self.organization_id,
        )
        if only_if_active:
            stmt = stmt.where(LogEntry.check_out_time.is_(None))
        result = self.db.execute(stmt.values(**values).execution_options(synchronize_session=False))
        self.db.commit()
        return result.rowcount == 1

    def delete_log_entry(self, entry_id: str) -> bool:
        row = self._entry_query().filter(LogEntry.id == entry_id).first()
        if not row:
            return False
        self.db.delete(row)
        self.db.commit()
        return True


def site_to_record(row: Site) -> SiteRecord:
    return SiteRecord(
        id=row.id,
        name=row.name,
        address=row.address,
        qr_code=row.qr_code,
        created_by=row.created_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def entry_to_record(row: LogEntry) -> LogEntryRecord:
    return LogEntryRecord(
        id=row.id,
        site_id=row.site_id,
        site_name=row.site_name,
        visitor_id=row.visitor_id,
        visitor_name=row.visitor_name,
        check_in_time=row.check_in_time,
        check_out_time=row.check_out_time,
        purpose=row.purpose,
        notes=row.notes,
        work_completed=bool(row.work_completed),
        images=list(row.images) if row.images else None,
    )


def _entry_columns(entry: LogEntryRecord) -> dict:
    return {
        "id": entry.id,
        "site_id": entry.site_id,
        "site_name": entry.site_name,
        "visitor_id": entry.visitor_id,
        "visitor_name": entry.visitor_name,
        "check_in_time": entry.check_in_time,
        "check_out_time": entry.check_out_time,
        "purpose": entry.purpose,
        "notes": entry.notes,
        "work_completed": entry.work_completed,
        "images": entry.images,
    }
