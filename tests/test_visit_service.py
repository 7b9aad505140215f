# tests/test_visit_service.py
"""Unit tests for the visit lifecycle (check-in / check-out)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from conftest import make_entry, make_site, make_user
from sitesync.services.errors import (
    AlreadyCheckedOut, EntryNotFound, InvalidInput, PermissionDenied, SiteNotFound,
)
from sitesync.services.logbook_query import filter_by_status
from sitesync.services.repository import InMemoryLogbookRepository
from sitesync.services.visit_service import check_in, check_out, delete_entry, get_entry

T0 = datetime(2026, 3, 2, 9, 0, 0)


def make_repo():
    return InMemoryLogbookRepository(sites=[
        make_site("s1", "A", "q1"),
        make_site("s2", "B", "q2"),
    ])


class TestCheckIn:
    def test_creates_active_entry_with_snapshots(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection", now=T0)

        assert entry.check_out_time is None
        assert entry.work_completed is False
        assert entry.site_id == "s1"
        assert entry.site_name == "A"
        assert entry.visitor_id == "u1"
        assert entry.visitor_name == "Jane Engineer"
        assert entry.check_in_time == T0
        assert repo.find_log_entry_by_id(entry.id) == entry

    def test_new_entry_is_classified_active(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection")
        assert [e.id for e in filter_by_status(repo.list_log_entries(), "active")] == [entry.id]

    def test_check_in_time_has_second_precision(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection",
                         now=datetime(2026, 3, 2, 9, 0, 0, 987654))
        assert entry.check_in_time.microsecond == 0

    def test_aware_time_is_stored_as_naive_utc(self):
        repo = make_repo()
        plus_two = timezone(timedelta(hours=2))
        entry = check_in(repo, "q1", make_user(), "Inspection",
                         now=datetime(2026, 3, 2, 11, 0, 0, tzinfo=plus_two))
        assert entry.check_in_time == T0

    def test_purpose_is_trimmed(self):
        entry = check_in(make_repo(), "q1", make_user(), "  Inspection  ")
        assert entry.purpose == "Inspection"

    def test_blank_notes_become_none(self):
        entry = check_in(make_repo(), "q1", make_user(), "Inspection", notes="   ")
        assert entry.notes is None

    def test_unknown_qr_code_raises_site_not_found(self):
        repo = make_repo()
        with pytest.raises(SiteNotFound):
            check_in(repo, "nope", make_user(), "Inspection")
        assert repo.list_log_entries() == []

    @pytest.mark.parametrize("purpose", ["", "   ", None])
    def test_empty_purpose_raises_invalid_input(self, purpose):
        repo = make_repo()
        with pytest.raises(InvalidInput, match="Purpose"):
            check_in(repo, "q1", make_user(), purpose)
        assert repo.list_log_entries() == []

    def test_empty_qr_code_raises_invalid_input(self):
        with pytest.raises(InvalidInput, match="QR code"):
            check_in(make_repo(), "  ", make_user(), "Inspection")

    def test_user_may_hold_several_active_visits(self):
        repo = make_repo()
        user = make_user()
        check_in(repo, "q1", user, "Inspection")
        check_in(repo, "q1", user, "Second look")
        check_in(repo, "q2", user, "Repair")
        assert len(filter_by_status(repo.list_log_entries(), "active")) == 3

    def test_other_entries_untouched(self):
        existing = make_entry("old", check_out=T0 + timedelta(hours=1))
        repo = InMemoryLogbookRepository(sites=[make_site()], entries=[existing])
        check_in(repo, "q1", make_user(), "Inspection")
        assert repo.find_log_entry_by_id("old") == existing


class TestCheckOut:
    def test_completes_entry(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection", now=T0)

        done = check_out(repo, entry.id, True, notes="Fixed the boiler",
                         now=T0 + timedelta(minutes=45))

        assert done.check_out_time == T0 + timedelta(minutes=45)
        assert done.work_completed is True
        assert done.notes == "Fixed the boiler"
        stored = repo.find_log_entry_by_id(entry.id)
        assert stored.check_out_time == done.check_out_time
        assert [e.id for e in filter_by_status(repo.list_log_entries(), "completed")] == [entry.id]

    def test_notes_kept_when_not_given(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection", notes="Gate code 1234", now=T0)
        done = check_out(repo, entry.id, False, now=T0 + timedelta(minutes=5))
        assert done.notes == "Gate code 1234"
        assert done.work_completed is False

    def test_images_are_attached(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection", now=T0)
        done = check_out(repo, entry.id, True, images=["img/1.jpg", "", "img/2.jpg"],
                         now=T0 + timedelta(minutes=5))
        assert done.images == ["img/1.jpg", "img/2.jpg"]

    def test_second_check_out_rejected(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection", now=T0)
        first = check_out(repo, entry.id, True, now=T0 + timedelta(minutes=30))

        with pytest.raises(AlreadyCheckedOut):
            check_out(repo, entry.id, False, notes="overwrite", now=T0 + timedelta(hours=2))

        stored = repo.find_log_entry_by_id(entry.id)
        assert stored.check_out_time == first.check_out_time
        assert stored.notes is None
        assert stored.work_completed is True

    def test_unknown_entry_raises_entry_not_found(self):
        with pytest.raises(EntryNotFound):
            check_out(make_repo(), "missing", True)

    def test_check_out_before_check_in_rejected(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection", now=T0)
        with pytest.raises(InvalidInput):
            check_out(repo, entry.id, True, now=T0 - timedelta(seconds=1))
        assert repo.find_log_entry_by_id(entry.id).is_active

    def test_check_out_at_same_second_allowed(self):
        repo = make_repo()
        entry = check_in(repo, "q1", make_user(), "Inspection", now=T0)
        done = check_out(repo, entry.id, True, now=T0)
        assert done.check_out_time == done.check_in_time

    def test_lost_race_reports_already_checked_out(self):
        """The store refuses the conditional write — another check-out won."""
        active = make_entry("e1", check_in=T0)
        repo = MagicMock()
        repo.find_log_entry_by_id.return_value = active
        repo.replace_log_entry.return_value = False

        with pytest.raises(AlreadyCheckedOut):
            check_out(repo, "e1", True, now=T0 + timedelta(minutes=1))

        _, kwargs = repo.replace_log_entry.call_args
        assert kwargs["only_if_active"] is True


class TestScenario:
    def test_two_sites_full_flow(self):
        from sitesync.services.analytics_service import summarize

        repo = make_repo()
        user = make_user(user_id="U1", name="U1")

        e1 = check_in(repo, "q1", user, "Inspection", now=T0)
        assert e1.is_active and e1.site_name == "A"

        e1 = check_out(repo, e1.id, True, now=T0 + timedelta(minutes=20))
        assert not e1.is_active
        assert (e1.check_out_time - e1.check_in_time).total_seconds() >= 0

        e2 = check_in(repo, "q2", user, "Inspection", now=T0 + timedelta(minutes=30))
        assert e2.is_active

        summary = summarize(repo.list_log_entries(), repo.list_sites())
        assert summary.total_visits == 2
        assert summary.active_visits == 1
        assert summary.visits_by_site == [("A", 1), ("B", 1)]


class TestMaintenance:
    def test_get_entry_not_found(self):
        with pytest.raises(EntryNotFound):
            get_entry(make_repo(), "missing")

    def test_admin_can_delete(self):
        repo = InMemoryLogbookRepository(entries=[make_entry("e1")])
        delete_entry(repo, "e1", make_user(role="admin"))
        assert repo.list_log_entries() == []

    def test_engineer_cannot_delete(self):
        repo = InMemoryLogbookRepository(entries=[make_entry("e1")])
        with pytest.raises(PermissionDenied):
            delete_entry(repo, "e1", make_user(role="engineer"))
        assert len(repo.list_log_entries()) == 1

    def test_delete_missing_entry(self):
        with pytest.raises(EntryNotFound):
            delete_entry(make_repo(), "missing", make_user(role="owner"))
