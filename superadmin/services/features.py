"""
Feature flag catalog and per-organization resolution.

The catalog lists the sidebar modules of the tenant application. An
organization without a row for a feature has it enabled.
"""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from superadmin.models import OrganizationFeature
from superadmin.models.base import utc_now


@dataclass(frozen=True)
class FeatureDefinition:
    key: str
    name: str
    description: str


FEATURE_CATALOG: tuple[FeatureDefinition, ...] = (
    FeatureDefinition("dashboard", "Dashboard", "Main dashboard and analytics"),
    FeatureDefinition("employees", "Employees", "Employee management"),
    FeatureDefinition("attendance", "Attendance", "Attendance tracking"),
    FeatureDefinition("leave", "Leave Management", "Leave requests and approvals"),
    FeatureDefinition("tasks", "Tasks", "Task management"),
    FeatureDefinition("expenses", "Expenses", "Expense tracking"),
    FeatureDefinition("payroll", "Payroll", "Payroll processing"),
    FeatureDefinition("training", "Training", "Training programs"),
    FeatureDefinition("work-reports", "Work Reports", "Work reports and logs"),
    FeatureDefinition("reports", "Reports", "Analytics and reports"),
    FeatureDefinition("settings", "Settings", "Organization settings"),
)

FEATURE_KEYS = frozenset(feature.key for feature in FEATURE_CATALOG)


def unknown_feature_keys(keys) -> list[str]:
    return sorted(set(keys) - FEATURE_KEYS)


async def get_feature_states(db: AsyncSession, organization_id: str) -> dict[str, bool]:
    """Enabled state of every catalog feature for an organization."""
    result = await db.execute(
        select(OrganizationFeature.feature_key, OrganizationFeature.is_enabled).where(
            OrganizationFeature.organization_id == organization_id
        )
    )
    stored = {key: enabled for key, enabled in result.all()}
    return {feature.key: stored.get(feature.key, True) for feature in FEATURE_CATALOG}


async def save_feature_states(
    db: AsyncSession, organization_id: str, states: dict[str, bool]
) -> dict[str, bool]:
    """
    Upsert feature toggles on (organization_id, feature_key).

    Args:
        db: Database session
        organization_id: Organization id
        states: Map of feature key to enabled flag (keys must be in the catalog)

    Returns:
        Resulting state of every catalog feature
    """
    result = await db.execute(
        select(OrganizationFeature).where(OrganizationFeature.organization_id == organization_id)
    )
    existing = {row.feature_key: row for row in result.scalars().all()}

    now = utc_now()
    for key, enabled in states.items():
        row = existing.get(key)
        if row is None:
            db.add(OrganizationFeature(organization_id=organization_id, feature_key=key, is_enabled=enabled))
        else:
            row.is_enabled = enabled
            row.updated_at = now

    await db.commit()
    return await get_feature_states(db, organization_id)
