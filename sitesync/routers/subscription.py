# sitesync/routers/subscription.py
"""Billing endpoints — plan catalog, current subscription usage, plan changes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sitesync.database import get_db
from sitesync.dependencies import get_current_user
from sitesync.schemas.subscription import PlanChange, PlanOut, SubscriptionOut
from sitesync.services import subscription_service, team_service
from sitesync.services.records import CurrentUser
from sitesync.services.usage_service import PLANS

router = APIRouter()


@router.get("/plans", response_model=list[PlanOut], summary="Available subscription plans")
def list_plans():
    return list(PLANS.values())


@router.get("/subscription", response_model=SubscriptionOut, summary="Plan, status and usage")
def get_subscription(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Usage bands: >= 90% critical, >= 75% warning. Unlimited (-1) dimensions always read 0%."""
    org = team_service.get_organization(db, user.organization_id)
    return subscription_service.get_subscription(db, org)


@router.put("/subscription/plan", response_model=SubscriptionOut, summary="Change plan (admin)")
def change_plan(
    body: PlanChange,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    org = team_service.get_organization(db, user.organization_id)
    subscription_service.change_plan(db, org, user, body.plan_id)
    return subscription_service.get_subscription(db, org)
