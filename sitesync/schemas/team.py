# sitesync/schemas/team.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class OwnerIn(BaseModel):
    email: str
    full_name: str


class OrganizationCreate(BaseModel):
    name: str
    owner: OwnerIn


class OrganizationOut(BaseModel):
    id: str
    name: str
    owner_id: str
    subscription_plan: Optional[str]
    subscription_status: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class MemberCreate(BaseModel):
    email: str
    full_name: Optional[str] = None
    role: str = "engineer"


class RoleUpdate(BaseModel):
    role: str


class MemberOut(BaseModel):
    user_id: str
    full_name: str
    email: str
    role: str
    avatar_url: Optional[str] = None
    joined_at: Optional[datetime] = None


class MemberListOut(BaseModel):
    members: list[MemberOut]
    role_counts: dict[str, int]


def member_out(member, profile) -> MemberOut:
    return MemberOut(
        user_id=profile.id,
        full_name=profile.full_name,
        email=profile.email,
        role=member.role,
        avatar_url=profile.avatar_url,
        joined_at=member.joined_at,
    )
