# sitesync/models/profile.py
"""
User profiles. A profile exists once per email address and can be a member
of several organizations (see OrganizationMember).
"""

import uuid
from sqlalchemy import Column, String, DateTime
from sitesync.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    avatar_url = Column(String(500))
    phone = Column(String(50))
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Profile {self.id} email={self.email}>"
