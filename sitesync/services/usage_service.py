# sitesync/services/usage_service.py
"""
Subscription plans and usage reporting.

A limit of -1 means "unlimited": it is always reported as 0% and is never over.
Bands (normal / warning / critical) are presentation hints only — nothing here
blocks an action when a plan limit is reached.
"""

from dataclasses import dataclass
from typing import Optional

from sitesync.config import settings
from sitesync.services.records import Plan, PlanLimits, UsageCounts

UNLIMITED = -1

BAND_NORMAL = "normal"
BAND_WARNING = "warning"
BAND_CRITICAL = "critical"

DIMENSIONS = ("users", "sites", "api_calls")

PLANS: dict[str, Plan] = {
    "starter": Plan(
        id="starter",
        name="Starter",
        price=29,
        interval="month",
        limits=PlanLimits(users=5, sites=10, api_calls=1000),
        features=[
            "Up to 5 team members",
            "Up to 10 sites",
            "Basic reporting",
            "Mobile app access",
            "Email support",
        ],
    ),
    "professional": Plan(
        id="professional",
        name="Professional",
        price=99,
        interval="month",
        limits=PlanLimits(users=25, sites=UNLIMITED, api_calls=10000),
        features=[
            "Up to 25 team members",
            "Unlimited sites",
            "Advanced analytics",
            "API access",
            "Priority support",
            "Custom integrations",
        ],
        popular=True,
    ),
    "enterprise": Plan(
        id="enterprise",
        name="Enterprise",
        price=299,
        interval="month",
        limits=PlanLimits(users=UNLIMITED, sites=UNLIMITED, api_calls=100000),
        features=[
            "Unlimited team members",
            "Unlimited sites",
            "White-label solution",
            "Custom integrations",
            "Dedicated support",
            "SLA guarantee",
            "Advanced security",
        ],
    ),
}

# Used when the organization has no plan or an unknown plan id
FALLBACK_LIMITS = PlanLimits(users=5, sites=10, api_calls=1000)


@dataclass
class DimensionUsage:
    dimension: str
    current: int
    limit: int
    percentage: float
    band: str
    unlimited: bool
    over_limit: bool


def get_plan(plan_id: Optional[str]) -> Optional[Plan]:
    return PLANS.get(plan_id) if plan_id else None


def limits_for(plan_id: Optional[str]) -> PlanLimits:
    plan = get_plan(plan_id)
    return plan.limits if plan else FALLBACK_LIMITS


def usage_percentage(current: int, limit: int) -> float:
    """current / limit × 100 clamped to [0, 100]; unlimited is always 0."""
    if limit == UNLIMITED:
        return 0.0
    if limit <= 0:
        return 100.0 if current > 0 else 0.0
    return max(0.0, min(current / limit * 100, 100.0))


def usage_band(percentage: float) -> str:
    if percentage >= settings.USAGE_CRITICAL_PERCENT:
        return BAND_CRITICAL
    if percentage >= settings.USAGE_WARNING_PERCENT:
        return BAND_WARNING
    return BAND_NORMAL


def dimension_usage(dimension: str, current: int, limit: int) -> DimensionUsage:
    pct = usage_percentage(current, limit)
    unlimited = limit == UNLIMITED
    return DimensionUsage(
        dimension=dimension,
        current=current,
        limit=limit,
        percentage=round(pct, 1),
        band=usage_band(pct),
        unlimited=unlimited,
        over_limit=not unlimited and current > limit,
    )


def compute_usage(plan_id: Optional[str], counts: UsageCounts) -> list[DimensionUsage]:
    """One DimensionUsage per tracked dimension, in DIMENSIONS order."""
    limits = limits_for(plan_id)
    return [
        dimension_usage(dim, getattr(counts, dim), getattr(limits, dim))
        for dim in DIMENSIONS
    ]
