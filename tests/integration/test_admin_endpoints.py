"""
Integration tests for the dashboard API (organizations, features, tickets,
error logs, analytics).
"""

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from superadmin.models import (
    Employee,
    ErrorLog,
    Organization,
    OrganizationFeature,
    SupportTicket,
    TicketComment,
    UserProfile,
)
from superadmin.models.base import utc_now

pytestmark = pytest.mark.integration


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def second_organization(test_db: AsyncSession) -> Organization:
    """Older, inactive organization without a subscription."""
    org = Organization(
        id="org-2",
        name="Dormant Ltd",
        email="hello@dormant.example",
        is_active=False,
        created_at=utc_now() - timedelta(days=40),
    )
    test_db.add(org)
    await test_db.commit()
    return org


@pytest_asyncio.fixture
async def test_ticket(test_db: AsyncSession, test_organization: Organization, org_members) -> SupportTicket:
    ticket = SupportTicket(
        organization_id=test_organization.id,
        ticket_number="TKT-0001",
        title="Payroll export fails",
        description="Exporting payroll returns an error.",
        priority="high",
        created_by=org_members[0].user_id,
    )
    test_db.add(ticket)
    await test_db.commit()
    return ticket


@pytest_asyncio.fixture
async def test_error_logs(test_db: AsyncSession, test_organization: Organization) -> list[ErrorLog]:
    logs = [
        ErrorLog(
            organization_id=test_organization.id,
            organization_name=test_organization.name,
            user_email="owner@testorg.com",
            error_message="TypeError: Cannot read properties of undefined",
            severity="error",
            context_data={"component": "PayrollTable"},
        ),
        ErrorLog(
            organization_id=test_organization.id,
            organization_name=test_organization.name,
            error_message="Request timed out",
            severity="warning",
        ),
        ErrorLog(
            error_message="Old resolved crash",
            severity="critical",
            is_resolved=True,
        ),
    ]
    test_db.add_all(logs)
    await test_db.commit()
    return logs


class TestAccessControl:
    """Test the super admin gate on dashboard routes."""

    @pytest.mark.asyncio
    async def test_without_credentials(self, client: AsyncClient):
        response = await client.get("/api/v1/admin/organizations")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_member_is_forbidden(self, client: AsyncClient, member_token: str):
        response = await client.get("/api/v1/admin/me", headers=_auth(member_token))

        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied. Super admin privileges required."

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, super_admin_token: str):
        response = await client.get("/api/v1/admin/me", headers=_auth(super_admin_token))

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "admin-1"
        assert data["role"] == "super_admin"
        assert data["full_name"] == "Platform Operator"


class TestOrganizations:
    """Test organization browsing and updates."""

    @pytest.mark.asyncio
    async def test_list_newest_first_with_plan(
        self, client: AsyncClient, super_admin_token, test_organization, second_organization
    ):
        response = await client.get("/api/v1/admin/organizations", headers=_auth(super_admin_token))

        assert response.status_code == 200
        data = response.json()
        assert [org["id"] for org in data] == ["org-1", "org-2"]
        assert data[0]["plan_name"] == "Professional"
        assert data[0]["status"] == "active"
        assert data[1]["plan_name"] is None
        assert data[1]["status"] == "inactive"

    @pytest.mark.asyncio
    async def test_search_and_filter(
        self, client: AsyncClient, super_admin_token, test_organization, second_organization
    ):
        response = await client.get(
            "/api/v1/admin/organizations", params={"search": "dormant"}, headers=_auth(super_admin_token)
        )
        assert [org["id"] for org in response.json()] == ["org-2"]

        response = await client.get(
            "/api/v1/admin/organizations", params={"is_active": "true"}, headers=_auth(super_admin_token)
        )
        assert [org["id"] for org in response.json()] == ["org-1"]

    @pytest.mark.asyncio
    async def test_details_with_stats(
        self, client: AsyncClient, test_db, super_admin_token, test_organization, org_members
    ):
        test_db.add(Employee(organization_id=test_organization.id, full_name="Org Owner"))
        await test_db.commit()

        response = await client.get(
            f"/api/v1/admin/organizations/{test_organization.id}", headers=_auth(super_admin_token)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["employee_count"] == 1
        assert data["active_user_count"] == 2
        assert "dashboard" in data["enabled_features"]

    @pytest.mark.asyncio
    async def test_details_enabled_features(
        self, client: AsyncClient, test_db, super_admin_token, test_organization
    ):
        test_db.add_all([
            OrganizationFeature(organization_id=test_organization.id, feature_key="payroll", is_enabled=False),
            OrganizationFeature(organization_id=test_organization.id, feature_key="tasks", is_enabled=True),
        ])
        await test_db.commit()

        response = await client.get(
            f"/api/v1/admin/organizations/{test_organization.id}", headers=_auth(super_admin_token)
        )

        enabled = response.json()["enabled_features"]
        assert "payroll" not in enabled
        assert "tasks" in enabled
        # Catalog features without a stored row count as enabled
        assert "attendance" in enabled

    @pytest.mark.asyncio
    async def test_details_not_found(self, client: AsyncClient, super_admin_token):
        response = await client.get("/api/v1/admin/organizations/nope", headers=_auth(super_admin_token))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_deactivate(self, client: AsyncClient, super_admin_token, test_organization):
        response = await client.patch(
            f"/api/v1/admin/organizations/{test_organization.id}",
            json={"is_active": False, "phone": "+1 555 0100"},
            headers=_auth(super_admin_token),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_active"] is False
        assert data["status"] == "inactive"
        assert data["phone"] == "+1 555 0100"

    @pytest.mark.asyncio
    async def test_no_plain_delete_route(self, client: AsyncClient, super_admin_token, test_organization):
        response = await client.delete(
            f"/api/v1/admin/organizations/{test_organization.id}", headers=_auth(super_admin_token)
        )

        assert response.status_code == 405


class TestFeatures:
    """Test per-organization feature flags."""

    @pytest.mark.asyncio
    async def test_catalog_defaults_to_enabled(self, client: AsyncClient, super_admin_token, test_organization):
        response = await client.get(
            f"/api/v1/admin/organizations/{test_organization.id}/features", headers=_auth(super_admin_token)
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 11
        assert all(feature["is_enabled"] for feature in data)

    @pytest.mark.asyncio
    async def test_toggle_feature(self, client: AsyncClient, super_admin_token, test_organization):
        response = await client.put(
            f"/api/v1/admin/organizations/{test_organization.id}/features",
            json={"features": {"payroll": False}},
            headers=_auth(super_admin_token),
        )

        assert response.status_code == 200
        states = {feature["key"]: feature["is_enabled"] for feature in response.json()}
        assert states["payroll"] is False
        assert states["attendance"] is True

    @pytest.mark.asyncio
    async def test_unknown_feature_rejected(self, client: AsyncClient, super_admin_token, test_organization):
        response = await client.put(
            f"/api/v1/admin/organizations/{test_organization.id}/features",
            json={"features": {"teleport": True}},
            headers=_auth(super_admin_token),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_organization(self, client: AsyncClient, super_admin_token):
        response = await client.get("/api/v1/admin/organizations/nope/features", headers=_auth(super_admin_token))

        assert response.status_code == 404


class TestTickets:
    """Test support ticket handling."""

    @pytest.mark.asyncio
    async def test_list_with_organization_and_creator(self, client: AsyncClient, super_admin_token, test_ticket):
        response = await client.get("/api/v1/admin/tickets", headers=_auth(super_admin_token))

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["organization_name"] == "Test Organization"
        assert data[0]["creator_email"] == "owner@testorg.com"

    @pytest.mark.asyncio
    async def test_search_by_organization_name(self, client: AsyncClient, super_admin_token, test_ticket):
        response = await client.get(
            "/api/v1/admin/tickets", params={"search": "test org"}, headers=_auth(super_admin_token)
        )
        assert len(response.json()) == 1

        response = await client.get(
            "/api/v1/admin/tickets", params={"status": "closed"}, headers=_auth(super_admin_token)
        )
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_resolve_sets_timestamp(self, client: AsyncClient, super_admin_token, test_ticket):
        response = await client.patch(
            f"/api/v1/admin/tickets/{test_ticket.id}",
            json={"status": "resolved"},
            headers=_auth(super_admin_token),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "resolved"
        assert data["resolved_at"] is not None
        assert data["closed_at"] is None

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, client: AsyncClient, super_admin_token, test_ticket):
        response = await client.patch(
            f"/api/v1/admin/tickets/{test_ticket.id}",
            json={"status": "archived"},
            headers=_auth(super_admin_token),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_comments(self, client: AsyncClient, test_db, super_admin_token, test_ticket, org_members):
        test_db.add(TicketComment(ticket_id=test_ticket.id, user_id=org_members[0].user_id, message="Any news?"))
        await test_db.commit()

        response = await client.post(
            f"/api/v1/admin/tickets/{test_ticket.id}/comments",
            json={"message": "  Looking into it.  "},
            headers=_auth(super_admin_token),
        )

        assert response.status_code == 201
        assert response.json()["user_id"] == "admin-1"
        assert response.json()["message"] == "Looking into it."

        response = await client.get(
            f"/api/v1/admin/tickets/{test_ticket.id}/comments", headers=_auth(super_admin_token)
        )

        messages = [comment["message"] for comment in response.json()]
        assert messages == ["Any news?", "Looking into it."]
        assert response.json()[1]["author_name"] == "Platform Operator"

    @pytest.mark.asyncio
    async def test_blank_comment_rejected(self, client: AsyncClient, super_admin_token, test_ticket):
        response = await client.post(
            f"/api/v1/admin/tickets/{test_ticket.id}/comments",
            json={"message": "   "},
            headers=_auth(super_admin_token),
        )

        assert response.status_code == 422


class TestErrorLogs:
    """Test error log review."""

    @pytest.mark.asyncio
    async def test_unresolved_by_default(self, client: AsyncClient, super_admin_token, test_error_logs):
        response = await client.get("/api/v1/admin/error-logs", headers=_auth(super_admin_token))

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 2
        assert all(not log["is_resolved"] for log in data)

    @pytest.mark.asyncio
    async def test_filters(self, client: AsyncClient, super_admin_token, test_error_logs):
        response = await client.get(
            "/api/v1/admin/error-logs",
            params={"unresolved_only": "false", "severity": "critical"},
            headers=_auth(super_admin_token),
        )
        assert [log["error_message"] for log in response.json()] == ["Old resolved crash"]

        response = await client.get(
            "/api/v1/admin/error-logs", params={"search": "owner@"}, headers=_auth(super_admin_token)
        )
        data = response.json()
        assert len(data) == 1
        assert data[0]["metadata"] == {"component": "PayrollTable"}

    @pytest.mark.asyncio
    async def test_unknown_severity_rejected(self, client: AsyncClient, super_admin_token, test_error_logs):
        response = await client.get(
            "/api/v1/admin/error-logs", params={"severity": "fatal"}, headers=_auth(super_admin_token)
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_resolve(self, client: AsyncClient, super_admin_token, test_error_logs):
        response = await client.post(
            f"/api/v1/admin/error-logs/{test_error_logs[0].id}/resolve",
            json={"notes": "Fixed in 2.4.1"},
            headers=_auth(super_admin_token),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_resolved"] is True
        assert data["resolved_by"] == "admin-1"
        assert data["notes"] == "Fixed in 2.4.1"

    @pytest.mark.asyncio
    async def test_resolve_unknown(self, client: AsyncClient, super_admin_token):
        response = await client.post("/api/v1/admin/error-logs/nope/resolve", headers=_auth(super_admin_token))

        assert response.status_code == 404


class TestAnalytics:
    """Test dashboard statistics."""

    @pytest.mark.asyncio
    async def test_analytics(
        self, client: AsyncClient, super_admin_token, test_organization, second_organization
    ):
        response = await client.get("/api/v1/admin/analytics", headers=_auth(super_admin_token))

        assert response.status_code == 200
        data = response.json()
        assert data["total_organizations"] == 2
        assert data["registrations_today"] == 1
        assert len(data["monthly_registrations"]) == 6
        assert data["monthly_registrations"][-1]["count"] >= 1
        assert data["plan_distribution"] == [{"plan": "Professional", "count": 1}]
        assert isinstance(data["growth_rate"], int)

    @pytest.mark.asyncio
    async def test_overview(self, client: AsyncClient, super_admin_token, test_organization, test_error_logs):
        response = await client.get("/api/v1/admin/overview", headers=_auth(super_admin_token))

        assert response.status_code == 200
        data = response.json()
        assert [org["id"] for org in data["recent_organizations"]] == ["org-1"]
        assert len(data["recent_errors"]) == 3


class TestServiceEndpoints:
    """Test root and health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.json()["status"] == "running"
