# sitesync/services/team_service.py
"""
Organizations, members and caller identity.

Roles inside an organization:
  owner    — created with the organization, full rights, cannot be removed or demoted
  admin    — manages sites and the team
  manager  — manages the team (but cannot grant admin)
  engineer / member — field staff: check in and out, read the logbook
"""

from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sitesync.models.organization import Organization, OrganizationMember
from sitesync.models.profile import Profile
from sitesync.services.errors import (
    InvalidInput, MemberNotFound, NoOrganizationSelected, OrganizationNotFound, PermissionDenied,
)
from sitesync.services.records import (
    ROLES, ROLE_ADMIN, ROLE_ENGINEER, ROLE_OWNER, CurrentUser,
)
from sitesync.utils.time_utils import utcnow
from sitesync.utils.logger import get_logger

logger = get_logger(__name__)

ASSIGNABLE_ROLES = tuple(r for r in ROLES if r != ROLE_OWNER)


# ── Organizations ────────────────────────────────────────────────────────────

def get_organization(db: Session, organization_id: Optional[str]) -> Organization:
    if not organization_id:
        raise NoOrganizationSelected()
    org = db.query(Organization).filter(Organization.id == organization_id).first()
    if not org:
        raise OrganizationNotFound(f"Organization {organization_id} not found")
    return org


def get_or_create_profile(db: Session, email: str, full_name: Optional[str]) -> Profile:
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise InvalidInput("A valid email address is required")

    profile = db.query(Profile).filter(Profile.email == email).first()
    if profile:
        return profile

    full_name = (full_name or "").strip()
    if not full_name:
        raise InvalidInput("Full name is required for a new user")
    now = utcnow()
    profile = Profile(email=email, full_name=full_name, created_at=now, updated_at=now)
    db.add(profile)
    try:
        db.flush()
    except IntegrityError:
        # Another request created the same email between our lookup and flush
        db.rollback()
        profile = db.query(Profile).filter(Profile.email == email).first()
        if profile is None:
            raise
        logger.info(f"[TEAM] Profile {email} created concurrently, reusing it")
    return profile


def create_organization(db: Session, name: str, owner_email: str, owner_full_name: str):
    """
    Onboarding: create the organization, its owner profile (if new) and the
    owner membership. New organizations start on the starter plan, trialing.
    Returns (organization, owner_profile).
    """
    name = (name or "").strip()
    if not name:
        raise InvalidInput("Organization name is required")

    profile = get_or_create_profile(db, owner_email, owner_full_name)
    now = utcnow()
    org = Organization(
        name=name,
        owner_id=profile.id,
        subscription_plan="starter",
        subscription_status="trialing",
        created_at=now,
        updated_at=now,
    )
    db.add(org)
    db.flush()
    db.add(OrganizationMember(
        organization_id=org.id,
        user_id=profile.id,
        role=ROLE_OWNER,
        joined_at=now,
        created_at=now,
    ))
    db.commit()
    logger.info(f"[TEAM] Organization {name!r} created — owner={profile.email}")
    return org, profile


# ── Identity ─────────────────────────────────────────────────────────────────

def resolve_current_user(db: Session, organization_id: Optional[str], user_id: Optional[str]) -> CurrentUser:
    """Map the caller's (organization, user) pair to a CurrentUser with role from membership."""
    org = get_organization(db, organization_id)
    if not user_id:
        raise PermissionDenied("Missing user identity")

    row = (
        db.query(OrganizationMember, Profile)
        .join(Profile, Profile.id == OrganizationMember.user_id)
        .filter(OrganizationMember.organization_id == org.id,
                OrganizationMember.user_id == user_id)
        .first()
    )
    if not row:
        raise PermissionDenied(f"User {user_id} is not a member of this organization")

    member, profile = row
    return CurrentUser(
        id=profile.id,
        name=profile.full_name,
        email=profile.email,
        role=member.role,
        organization_id=org.id,
    )


# ── Members ──────────────────────────────────────────────────────────────────

def list_members(db: Session, organization_id: str, role: Optional[str] = None):
    """Returns [(OrganizationMember, Profile)] ordered by name."""
    if role is not None and role not in ROLES:
        raise InvalidInput(f"Unknown role {role!r}")
    q = (
        db.query(OrganizationMember, Profile)
        .join(Profile, Profile.id == OrganizationMember.user_id)
        .filter(OrganizationMember.organization_id == organization_id)
    )
    if role:
        q = q.filter(OrganizationMember.role == role)
    return q.order_by(Profile.full_name).all()


def role_counts(db: Session, organization_id: str) -> dict:
    rows = (
        db.query(OrganizationMember.role, func.count(OrganizationMember.id))
        .filter(OrganizationMember.organization_id == organization_id)
        .group_by(OrganizationMember.role)
        .all()
    )
    counts = {role: 0 for role in ROLES}
    counts.update({role: count for role, count in rows})
    return counts


def count_members(db: Session, organization_id: str) -> int:
    return db.query(func.count(OrganizationMember.id)).filter(
        OrganizationMember.organization_id == organization_id
    ).scalar() or 0


def _check_can_grant(actor: CurrentUser, role: str):
    if not actor.can_manage_team:
        raise PermissionDenied("Only admins and managers can manage the team")
    if role not in ASSIGNABLE_ROLES:
        raise InvalidInput(f"Role must be one of {', '.join(ASSIGNABLE_ROLES)}")
    if role == ROLE_ADMIN and not actor.is_admin:
        raise PermissionDenied("Only administrators can grant the admin role")


def _get_member(db: Session, organization_id: str, user_id: str) -> OrganizationMember:
    member = db.query(OrganizationMember).filter(
        OrganizationMember.organization_id == organization_id,
        OrganizationMember.user_id == user_id,
    ).first()
    if not member:
        raise MemberNotFound(f"User {user_id} is not a member of this organization")
    return member


def add_member(
    db: Session,
    actor: CurrentUser,
    email: str,
    full_name: Optional[str] = None,
    role: str = ROLE_ENGINEER,
):
    """Invite a user by email. Returns (OrganizationMember, Profile)."""
    _check_can_grant(actor, role)
    profile = get_or_create_profile(db, email, full_name)

    existing = db.query(OrganizationMember).filter(
        OrganizationMember.organization_id == actor.organization_id,
        OrganizationMember.user_id == profile.id,
    ).first()
    if existing:
        raise InvalidInput(f"{profile.email} is already a member of this organization")

    now = utcnow()
    member = OrganizationMember(
        organization_id=actor.organization_id,
        user_id=profile.id,
        role=role,
        invited_by=actor.id,
        joined_at=now,
        created_at=now,
    )
    db.add(member)
    db.commit()
    logger.info(f"[TEAM] {profile.email} added as {role} by {actor.name}")
    return member, profile


def change_role(db: Session, actor: CurrentUser, user_id: str, role: str) -> OrganizationMember:
    _check_can_grant(actor, role)
    member = _get_member(db, actor.organization_id, user_id)
    if member.role == ROLE_OWNER:
        raise PermissionDenied("The organization owner's role cannot be changed")
    if member.role == ROLE_ADMIN and not actor.is_admin:
        raise PermissionDenied("Only administrators can change an admin's role")

    previous = member.role
    member.role = role
    db.commit()
    logger.info(f"[TEAM] {user_id}: {previous} → {role} by {actor.name}")
    return member


def remove_member(db: Session, actor: CurrentUser, user_id: str) -> None:
    if not actor.can_manage_team:
        raise PermissionDenied("Only admins and managers can manage the team")
    member = _get_member(db, actor.organization_id, user_id)
    if member.role == ROLE_OWNER:
        raise PermissionDenied("The organization owner cannot be removed")
    if member.role == ROLE_ADMIN and not actor.is_admin:
        raise PermissionDenied("Only administrators can remove an admin")

    db.delete(member)
    db.commit()
    logger.warning(f"[TEAM] {user_id} removed from {actor.organization_id} by {actor.name}")
