"""
Organization management API routes.

Read and update access to every tenant organization, plus per-organization
feature flags. Organizations are removed only through the deprovisioning
function (``POST /functions/v1/delete-account``).
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from superadmin.database import get_db
from superadmin.middleware.auth import require_super_admin
from superadmin.models import Employee, Organization, OrganizationSubscription, UserProfile
from superadmin.services.features import (
    FEATURE_CATALOG,
    get_feature_states,
    save_feature_states,
    unknown_feature_keys,
)

router = APIRouter(prefix="/api/v1/admin/organizations", tags=["organizations"])


# Pydantic schemas
class OrganizationUpdate(BaseModel):
    """Schema for updating an organization."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    website: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class OrganizationResponse(BaseModel):
    """Schema for organization response."""
    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    website: Optional[str]
    is_active: bool
    status: str
    plan_name: Optional[str] = None
    subscription_status: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrganizationDetailsResponse(OrganizationResponse):
    """Organization with usage statistics."""
    employee_count: int
    active_user_count: int
    enabled_features: List[str]


class FeatureState(BaseModel):
    key: str
    name: str
    description: str
    is_enabled: bool


class FeatureUpdate(BaseModel):
    """Feature toggles keyed by feature key."""
    features: dict[str, bool]


def organization_payload(organization: Organization) -> dict:
    subscription = organization.current_subscription
    return {
        "id": organization.id,
        "name": organization.name,
        "email": organization.email,
        "phone": organization.phone,
        "website": organization.website,
        "is_active": organization.is_active,
        "status": "active" if organization.is_active else "inactive",
        "plan_name": subscription.plan.name if subscription and subscription.plan else None,
        "subscription_status": subscription.status if subscription else None,
        "created_at": organization.created_at,
        "updated_at": organization.updated_at,
    }


async def _get_organization_or_404(db: AsyncSession, organization_id: str) -> Organization:
    result = await db.execute(
        select(Organization)
        .options(selectinload(Organization.subscriptions).selectinload(OrganizationSubscription.plan))
        .where(Organization.id == organization_id)
    )
    organization = result.scalar_one_or_none()

    if not organization:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Organization {organization_id} not found"
        )

    return organization


@router.get("", response_model=List[OrganizationResponse])
async def list_organizations(
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    List organizations, newest first.

    Args:
        search: Case-insensitive match on name or email
        is_active: Filter by active status
        skip: Number of records to skip (pagination)
        limit: Maximum number of records to return

    Returns:
        Organizations with their current plan
    """
    query = select(Organization).options(
        selectinload(Organization.subscriptions).selectinload(OrganizationSubscription.plan)
    )

    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(Organization.name.ilike(pattern), Organization.email.ilike(pattern)))

    if is_active is not None:
        query = query.where(Organization.is_active == is_active)

    query = query.order_by(Organization.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return [organization_payload(organization) for organization in result.scalars().all()]


@router.get("/{organization_id}", response_model=OrganizationDetailsResponse)
async def get_organization(
    organization_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    Get organization details with employee, active user and feature statistics.

    Raises:
        HTTPException: If organization not found
    """
    organization = await _get_organization_or_404(db, organization_id)

    employee_count = await db.scalar(
        select(func.count()).select_from(Employee).where(Employee.organization_id == organization_id)
    )
    active_user_count = await db.scalar(
        select(func.count()).select_from(UserProfile).where(
            UserProfile.current_organization_id == organization_id,
            UserProfile.is_active.is_(True)
        )
    )
    features = await get_feature_states(db, organization_id)

    return {
        **organization_payload(organization),
        "employee_count": employee_count or 0,
        "active_user_count": active_user_count or 0,
        "enabled_features": [key for key, enabled in features.items() if enabled],
    }


@router.patch("/{organization_id}", response_model=OrganizationResponse)
async def update_organization(
    organization_id: str,
    organization_update: OrganizationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    Update organization contact fields or active status.

    Raises:
        HTTPException: If organization not found
    """
    organization = await _get_organization_or_404(db, organization_id)

    update_data = organization_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(organization, field, value)

    await db.commit()

    organization = await _get_organization_or_404(db, organization_id)
    return organization_payload(organization)


@router.get("/{organization_id}/features", response_model=List[FeatureState])
async def list_organization_features(
    organization_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    Feature catalog with the organization's toggle state.

    Features without a stored toggle are enabled.
    """
    await _get_organization_or_404(db, organization_id)
    states = await get_feature_states(db, organization_id)

    return [
        FeatureState(
            key=feature.key,
            name=feature.name,
            description=feature.description,
            is_enabled=states[feature.key],
        )
        for feature in FEATURE_CATALOG
    ]


@router.put("/{organization_id}/features", response_model=List[FeatureState])
async def update_organization_features(
    organization_id: str,
    feature_update: FeatureUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    Save feature toggles for an organization.

    Raises:
        HTTPException: 404 if organization not found, 422 for unknown feature keys
    """
    await _get_organization_or_404(db, organization_id)

    unknown = unknown_feature_keys(feature_update.features)
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown feature keys: {', '.join(unknown)}"
        )

    states = await save_feature_states(db, organization_id, feature_update.features)

    return [
        FeatureState(
            key=feature.key,
            name=feature.name,
            description=feature.description,
            is_enabled=states[feature.key],
        )
        for feature in FEATURE_CATALOG
    ]
