# sitesync/models/organization.py
"""
Organizations (tenants) and their members.
Every site and log entry belongs to exactly one organization.
The member row carries the user's role inside that organization.
"""

import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sitesync.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    subscription_plan = Column(String(50))                  # starter | professional | enterprise
    subscription_status = Column(String(20), nullable=False, default="trialing")
    stripe_customer_id = Column(String(100))
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Organization {self.id} name={self.name} plan={self.subscription_plan}>"


class OrganizationMember(Base):
    __tablename__ = "organization_members"
    __table_args__ = (UniqueConstraint("organization_id", "user_id", name="uq_member_org_user"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False)               # owner | admin | manager | engineer | member
    invited_by = Column(String(36))
    joined_at = Column(DateTime)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<OrganizationMember org={self.organization_id} user={self.user_id} role={self.role}>"
