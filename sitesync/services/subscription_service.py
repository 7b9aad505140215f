# sitesync/services/subscription_service.py
"""
Subscription view for an organization: plan, status and current usage.
Usage counts come from the member and site tables. API calls are not metered
yet, so their current value is always 0.
Payment-provider checkout is handled outside this service; change_plan only
records the plan id once billing has been settled.
"""

from dataclasses import dataclass
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from sitesync.models.organization import Organization
from sitesync.models.site import Site
from sitesync.services.errors import InvalidInput, PermissionDenied
from sitesync.services.records import CurrentUser, Plan, UsageCounts
from sitesync.services.team_service import count_members
from sitesync.services.usage_service import BAND_NORMAL, PLANS, DimensionUsage, compute_usage, get_plan
from sitesync.utils.time_utils import utcnow
from sitesync.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SubscriptionView:
    organization_id: str
    plan_id: Optional[str]
    plan: Optional[Plan]
    status: str
    usage: list[DimensionUsage]


def current_counts(db: Session, organization_id: str) -> UsageCounts:
    sites = db.query(func.count(Site.id)).filter(Site.organization_id == organization_id).scalar() or 0
    return UsageCounts(users=count_members(db, organization_id), sites=sites, api_calls=0)


def get_subscription(db: Session, org: Organization) -> SubscriptionView:
    counts = current_counts(db, org.id)
    usage = compute_usage(org.subscription_plan, counts)
    for dim in usage:
        if dim.band != BAND_NORMAL:
            logger.info(f"[BILLING] {org.id} {dim.dimension} at {dim.percentage}% ({dim.band})")
    return SubscriptionView(
        organization_id=org.id,
        plan_id=org.subscription_plan,
        plan=get_plan(org.subscription_plan),
        status=org.subscription_status,
        usage=usage,
    )


def change_plan(db: Session, org: Organization, actor: CurrentUser, plan_id: str) -> Organization:
    if not actor.is_admin:
        raise PermissionDenied("Only administrators can change the subscription plan")
    if plan_id not in PLANS:
        raise InvalidInput(f"Invalid plan {plan_id!r}")

    previous = org.subscription_plan
    org.subscription_plan = plan_id
    org.subscription_status = "active"
    org.updated_at = utcnow()
    db.commit()
    logger.info(f"[BILLING] {org.id}: plan {previous} → {plan_id} by {actor.name}")
    return org
