# tests/test_site_service.py
"""Unit tests for site administration."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import re
import pytest
from datetime import timedelta
from unittest.mock import MagicMock

from conftest import make_site, make_user
from sitesync.services import site_service
from sitesync.services.errors import DuplicateQrCode, InvalidInput, PermissionDenied, SiteNotFound
from sitesync.services.repository import InMemoryLogbookRepository
from sitesync.services.visit_service import check_in


class TestGenerateQrCode:
    def test_format(self):
        assert site_service.generate_qr_code("North  Manufacturing Plant", millis=0) == \
            "site_north_manufacturing_plant_0"

    def test_base36_timestamp(self):
        assert site_service.generate_qr_code("HQ", millis=36 ** 2 + 35) == "site_hq_10z"

    def test_default_uses_current_time(self):
        assert re.fullmatch(r"site_west_data_center_[0-9a-z]+", site_service.generate_qr_code(" West Data Center "))


class TestCreateSite:
    def test_admin_creates_site_with_generated_token(self):
        repo = InMemoryLogbookRepository()
        site = site_service.create_site(repo, make_user(role="admin"), " Depot ", " 9 Dock Rd ")
        assert site.name == "Depot"
        assert site.address == "9 Dock Rd"
        assert site.qr_code.startswith("site_depot_")
        assert repo.find_site_by_qr_code(site.qr_code) == site

    def test_owner_counts_as_admin(self):
        site = site_service.create_site(InMemoryLogbookRepository(), make_user(role="owner"), "Depot", "Rd")
        assert site.created_by == "u1"

    @pytest.mark.parametrize("role", ["manager", "engineer", "member"])
    def test_non_admin_rejected(self, role):
        with pytest.raises(PermissionDenied):
            site_service.create_site(InMemoryLogbookRepository(), make_user(role=role), "Depot", "Rd")

    def test_name_and_address_required(self):
        repo = InMemoryLogbookRepository()
        with pytest.raises(InvalidInput):
            site_service.create_site(repo, make_user(role="admin"), "  ", "Rd")
        with pytest.raises(InvalidInput):
            site_service.create_site(repo, make_user(role="admin"), "Depot", "")

    def test_explicit_duplicate_token_rejected(self):
        repo = InMemoryLogbookRepository(sites=[make_site(qr_code="LABEL-001")])
        with pytest.raises(DuplicateQrCode):
            site_service.create_site(repo, make_user(role="admin"), "Depot", "Rd", qr_code="LABEL-001")

    def test_generated_token_skips_collisions(self, monkeypatch):
        monkeypatch.setattr(site_service.time, "time", lambda: 1.0)
        repo = InMemoryLogbookRepository(sites=[make_site(qr_code="site_depot_rs")])  # 1000 in base36
        site = site_service.create_site(repo, make_user(role="admin"), "Depot", "Rd")
        assert site.qr_code == "site_depot_rt"


class TestUpdateAndDelete:
    def test_update_of_site_deleted_meanwhile(self):
        repo = MagicMock()
        repo.find_site_by_id.return_value = make_site()
        repo.replace_site.return_value = False
        with pytest.raises(SiteNotFound):
            site_service.update_site(repo, make_user(role="admin"), "s1", name="New Name")

    def test_rename_keeps_token_and_history(self):
        repo = InMemoryLogbookRepository(sites=[make_site("s1", "Old Name", "q1")])
        entry = check_in(repo, "q1", make_user(), "Inspection")

        site = site_service.update_site(repo, make_user(role="admin"), "s1", name="New Name")

        assert site.name == "New Name"
        assert site.qr_code == "q1"
        assert repo.find_log_entry_by_id(entry.id).site_name == "Old Name"

    def test_update_missing_site(self):
        with pytest.raises(SiteNotFound):
            site_service.update_site(InMemoryLogbookRepository(), make_user(role="admin"), "nope", name="X")

    def test_delete_keeps_entries(self):
        repo = InMemoryLogbookRepository(sites=[make_site("s1", "A", "q1")])
        entry = check_in(repo, "q1", make_user(), "Inspection")

        site_service.delete_site(repo, make_user(role="admin"), "s1")

        assert repo.list_sites() == []
        assert repo.find_log_entry_by_id(entry.id).site_name == "A"
        with pytest.raises(SiteNotFound):
            site_service.lookup_by_qr_code(repo, "q1")

    def test_delete_requires_admin(self):
        repo = InMemoryLogbookRepository(sites=[make_site()])
        with pytest.raises(PermissionDenied):
            site_service.delete_site(repo, make_user(role="manager"), "s1")

    def test_lookup_blank_token(self):
        with pytest.raises(InvalidInput):
            site_service.lookup_by_qr_code(InMemoryLogbookRepository(), " ")
