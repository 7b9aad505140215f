# sitesync/models/site.py
"""
Sites — physical locations engineers check in to by scanning a QR code.
The qr_code token is unique inside one organization.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sitesync.database import Base


class Site(Base):
    __tablename__ = "sites"
    __table_args__ = (UniqueConstraint("organization_id", "qr_code", name="uq_site_org_qr_code"),)

    id = Column(String(36), primary_key=True)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=False)
    qr_code = Column(String(200), nullable=False, index=True)
    created_by = Column(String(36))
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Site {self.id} name={self.name} qr={self.qr_code}>"
