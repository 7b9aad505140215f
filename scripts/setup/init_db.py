"""
Initialize database — creates all tables, optionally seeds a demo organization.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed]
"""

import argparse
import sys
import os
from datetime import timedelta
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sitesync.database import SessionLocal, create_tables, engine
from sitesync.config import settings
from sitesync.services import site_service, team_service, visit_service
from sitesync.services.repository import SqlLogbookRepository
from sitesync.utils.time_utils import utcnow
from sqlalchemy import inspect, text

DEMO_SITES = [
    ("Downtown Office Building", "123 Main St, Downtown"),
    ("North Manufacturing Plant", "456 Industrial Way, Northside"),
    ("West Data Center", "789 Tech Blvd, Westside"),
    ("South Retail Complex", "101 Commerce Ave, Southside"),
]

DEMO_TEAM = [
    ("sarah.johnson@example.com", "Sarah Johnson", "manager"),
    ("john.smith@example.com", "John Smith", "engineer"),
    ("david.garcia@example.com", "David Garcia", "engineer"),
]


def seed_demo():
    """Demo organization with a few sites, engineers and visits (one still active)."""
    db = SessionLocal()
    try:
        org, owner = team_service.create_organization(
            db, "Demo Facilities Ltd", "admin@example.com", "Alex Admin",
        )
        admin = team_service.resolve_current_user(db, org.id, owner.id)
        engineers = []
        for email, name, role in DEMO_TEAM:
            _, profile = team_service.add_member(db, admin, email, name, role)
            engineers.append(team_service.resolve_current_user(db, org.id, profile.id))

        repo = SqlLogbookRepository(db, org.id)
        sites = [site_service.create_site(repo, admin, name, address) for name, address in DEMO_SITES]

        now = utcnow()
        for i, (site, engineer) in enumerate(zip(sites, engineers * 2)):
            start = now - timedelta(days=i, hours=3)
            entry = visit_service.check_in(repo, site.qr_code, engineer, "Routine maintenance", now=start)
            if i > 0:
                visit_service.check_out(repo, entry.id, True, notes="All systems normal",
                                        now=start + timedelta(hours=1, minutes=15 * i))

        print(f"🌱 Seeded demo organization {org.id}")
        print(f"   X-Organization-Id: {org.id}")
        print(f"   X-User-Id (owner): {owner.id}")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create SiteSync tables")
    parser.add_argument("--seed", action="store_true", help="also create a demo organization")
    args = parser.parse_args()

    print("🗄️  SiteSync DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed:
        seed_demo()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn sitesync.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
