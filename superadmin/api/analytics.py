"""
Dashboard analytics API routes.

Provides endpoints for:
- Registration statistics and plan distribution
- Console overview (recent organizations and errors)
"""

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from superadmin.api.error_logs import ErrorLogResponse
from superadmin.api.organizations import OrganizationResponse, organization_payload
from superadmin.database import get_db
from superadmin.middleware.auth import require_super_admin
from superadmin.models import ErrorLog, Organization, OrganizationSubscription, UserProfile
from superadmin.services.analytics import growth_rate, monthly_registrations, plan_distribution

router = APIRouter(prefix="/api/v1/admin", tags=["analytics"])

RECENT_ITEMS = 3


def _utc_date(value: datetime) -> date:
    # SQLite hands back naive values that were stored as UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


@router.get("/analytics", response_model=dict)
async def get_analytics(
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    Registration and subscription statistics.

    Returns:
        total_organizations, registrations_today, monthly_registrations
        (six calendar months, oldest first), growth_rate (percent against the
        previous month) and plan_distribution
    """
    result = await db.execute(select(Organization.created_at))
    created_dates = [_utc_date(value) for value in result.scalars().all()]
    today = datetime.now(timezone.utc).date()

    buckets = monthly_registrations(created_dates, today)

    result = await db.execute(
        select(OrganizationSubscription).options(selectinload(OrganizationSubscription.plan))
    )
    plan_names = [
        subscription.plan.name if subscription.plan else None
        for subscription in result.scalars().all()
    ]

    return {
        "total_organizations": len(created_dates),
        "registrations_today": sum(1 for value in created_dates if value == today),
        "monthly_registrations": buckets,
        "growth_rate": growth_rate(buckets),
        "plan_distribution": plan_distribution(plan_names),
    }


@router.get("/overview", response_model=dict)
async def get_overview(
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """Most recent organizations and error logs for the console landing page."""
    result = await db.execute(
        select(Organization)
        .options(selectinload(Organization.subscriptions).selectinload(OrganizationSubscription.plan))
        .order_by(Organization.created_at.desc())
        .limit(RECENT_ITEMS)
    )
    organizations = [
        OrganizationResponse(**organization_payload(organization)).model_dump(mode="json")
        for organization in result.scalars().all()
    ]

    result = await db.execute(
        select(ErrorLog).order_by(ErrorLog.created_at.desc()).limit(RECENT_ITEMS)
    )
    errors = [
        ErrorLogResponse.model_validate(error_log).model_dump(mode="json")
        for error_log in result.scalars().all()
    ]

    return {"recent_organizations": organizations, "recent_errors": errors}
