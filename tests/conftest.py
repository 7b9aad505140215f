# tests/conftest.py
"""
Shared pytest fixtures.

Provides:
- Isolated SQLite database file per test (tables created / dropped around it)
- FastAPI TestClient with get_db overridden
- A seeded organization with an owner, an admin, a manager and an engineer
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.pop("API_KEY", None)

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from sitesync.database import Base, get_db
from sitesync.main import app
from sitesync.services import team_service
from sitesync.services.records import CurrentUser, LogEntryRecord, SiteRecord


@pytest.fixture
def test_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    import sitesync.models  # noqa: F401  registers every table on Base.metadata
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(test_engine):
    session = sessionmaker(bind=test_engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def team(db):
    """Organization with one user per role. Returns a dict of CurrentUser keyed by role."""
    org, owner = team_service.create_organization(db, "Acme Facilities", "owner@acme.test", "Olivia Owner")
    owner_user = team_service.resolve_current_user(db, org.id, owner.id)
    users = {"org": org, "owner": owner_user}
    for role, email, name in [
        ("admin", "admin@acme.test", "Adam Admin"),
        ("manager", "manager@acme.test", "Mia Manager"),
        ("engineer", "eng@acme.test", "Eli Engineer"),
    ]:
        _, profile = team_service.add_member(db, owner_user, email, name, role)
        users[role] = team_service.resolve_current_user(db, org.id, profile.id)
    return users


def headers_for(user: CurrentUser) -> dict:
    return {"X-Organization-Id": user.organization_id, "X-User-Id": user.id}


# ── Plain record builders ────────────────────────────────────────────────────

def make_user(role="engineer", user_id="u1", name="Jane Engineer") -> CurrentUser:
    return CurrentUser(id=user_id, name=name, role=role, organization_id="org-1")


def make_site(site_id="s1", name="Site A", qr_code="q1", address="1 Main St") -> SiteRecord:
    return SiteRecord(id=site_id, name=name, address=address, qr_code=qr_code)


def make_entry(
    entry_id="e1",
    site_name="Site A",
    visitor_name="Jane Engineer",
    check_in=datetime(2026, 3, 2, 9, 0, 0),
    check_out=None,
    purpose="Inspection",
    notes=None,
    site_id="s1",
    visitor_id="u1",
) -> LogEntryRecord:
    return LogEntryRecord(
        id=entry_id,
        site_id=site_id,
        site_name=site_name,
        visitor_id=visitor_id,
        visitor_name=visitor_name,
        check_in_time=check_in,
        check_out_time=check_out,
        purpose=purpose,
        notes=notes,
    )
