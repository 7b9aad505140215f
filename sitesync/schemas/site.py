# sitesync/schemas/site.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SiteCreate(BaseModel):
    name: str
    address: str
    qr_code: Optional[str] = None     # generated from the name when omitted


class SiteUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None


class SiteOut(BaseModel):
    id: str
    name: str
    address: str
    qr_code: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
