# sitesync/schemas/subscription.py
from pydantic import BaseModel
from typing import Optional


class PlanLimitsOut(BaseModel):
    users: int          # -1 = unlimited
    sites: int
    api_calls: int

    class Config:
        from_attributes = True


class PlanOut(BaseModel):
    id: str
    name: str
    price: int
    interval: str
    features: list[str]
    limits: PlanLimitsOut
    popular: bool = False

    class Config:
        from_attributes = True


class UsageOut(BaseModel):
    dimension: str
    current: int
    limit: int
    percentage: float
    band: str           # normal | warning | critical
    unlimited: bool
    over_limit: bool

    class Config:
        from_attributes = True


class SubscriptionOut(BaseModel):
    organization_id: str
    plan_id: Optional[str]
    plan: Optional[PlanOut]
    status: str
    usage: list[UsageOut]

    class Config:
        from_attributes = True


class PlanChange(BaseModel):
    plan_id: str
