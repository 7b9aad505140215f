# sitesync/routers/members.py
"""Onboarding and team access — organizations and their members."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sitesync.database import get_db
from sitesync.dependencies import get_current_user
from sitesync.schemas.team import (
    MemberCreate, MemberListOut, MemberOut, OrganizationCreate, OrganizationOut, RoleUpdate, member_out,
)
from sitesync.services import team_service
from sitesync.services.errors import PermissionDenied
from sitesync.services.records import CurrentUser

router = APIRouter()


@router.post("/organizations", response_model=OrganizationOut, status_code=201,
             summary="Create an organization and its owner")
def create_organization(body: OrganizationCreate, db: Session = Depends(get_db)):
    org, _ = team_service.create_organization(db, body.name, body.owner.email, body.owner.full_name)
    return org


@router.get("/members", response_model=MemberListOut, summary="List team members")
def list_members(
    role: Optional[str] = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Admins and managers only. Optional role filter; role_counts always covers the whole team."""
    if not user.can_manage_team:
        raise PermissionDenied("Only admins and managers can view team access")
    rows = team_service.list_members(db, user.organization_id, role)
    return MemberListOut(
        members=[member_out(m, p) for m, p in rows],
        role_counts=team_service.role_counts(db, user.organization_id),
    )


@router.post("/members", response_model=MemberOut, status_code=201, summary="Add a team member")
def add_member(
    body: MemberCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    member, profile = team_service.add_member(db, user, body.email, body.full_name, body.role)
    return member_out(member, profile)


@router.put("/members/{user_id}/role", summary="Change a member's role")
def change_role(
    user_id: str,
    body: RoleUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    member = team_service.change_role(db, user, user_id, body.role)
    return {"user_id": user_id, "role": member.role, "status": "updated"}


@router.delete("/members/{user_id}", summary="Remove a team member")
def remove_member(
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    team_service.remove_member(db, user, user_id)
    return {"user_id": user_id, "status": "removed"}
