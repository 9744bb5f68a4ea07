"""
Pytest configuration and fixtures for the super admin console tests.

Provides fixtures for:
- Database session
- Test client
- Organizations and user profiles (super admin, tenant members)
- Caller tokens
- A recording fake of the identity provider admin API
"""

import os

# Settings are read once at import time, so the environment is set first
os.environ.setdefault("SUPERADMIN_DATABASE_URL", "sqlite+aiosqlite:///test_db.sqlite")
os.environ.setdefault("SUPERADMIN_JWT_SECRET", "test-jwt-secret-for-unit-tests-only")
os.environ.setdefault("SUPERADMIN_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("SUPERADMIN_SUPABASE_URL", "http://identity.test")

from typing import AsyncGenerator, Iterable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from superadmin.api.functions import get_identity_admin  # noqa: E402
from superadmin.clients.identity import IdentityProviderError  # noqa: E402
from superadmin.config.settings import Settings, get_settings  # noqa: E402
from superadmin.database import get_db  # noqa: E402
from superadmin.main import app  # noqa: E402
from superadmin.models import (  # noqa: E402
    Base,
    Organization,
    OrganizationSubscription,
    SubscriptionPlan,
    UserProfile,
)
from superadmin.security import create_access_token  # noqa: E402

# Test database URL (use file-based SQLite for tests to ensure table persistence)
TEST_DATABASE_FILE = "test_db.sqlite"
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DATABASE_FILE}"


class FakeIdentityAdmin:
    """Records identity account deletions; ids in ``fail_ids`` are rejected."""

    def __init__(self, fail_ids: Iterable[str] = ()):
        self.fail_ids = set(fail_ids)
        self.deleted: list[str] = []
        self.calls: list[str] = []

    async def delete_account(self, user_id: str) -> None:
        self.calls.append(user_id)
        if user_id in self.fail_ids:
            raise IdentityProviderError(f"User {user_id} could not be deleted", status_code=500)
        self.deleted.append(user_id)


@pytest.fixture
def settings() -> Settings:
    """Application settings as configured for the test run."""
    return get_settings()


@pytest.fixture
def identity_admin() -> FakeIdentityAdmin:
    return FakeIdentityAdmin()


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine."""
    # Remove old test database if exists
    if os.path.exists(TEST_DATABASE_FILE):
        os.remove(TEST_DATABASE_FILE)

    engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()

    # Clean up test database file
    if os.path.exists(TEST_DATABASE_FILE):
        os.remove(TEST_DATABASE_FILE)


@pytest_asyncio.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def test_plan(test_db: AsyncSession) -> SubscriptionPlan:
    """Create subscription plan."""
    plan = SubscriptionPlan(name="Professional", description="Up to 100 employees")
    test_db.add(plan)
    await test_db.commit()
    return plan


@pytest_asyncio.fixture
async def test_organization(test_db: AsyncSession, test_plan: SubscriptionPlan) -> Organization:
    """Create test organization ("org-1") subscribed to the test plan."""
    org = Organization(
        id="org-1",
        name="Test Organization",
        email="admin@testorg.com",
        is_active=True,
    )
    test_db.add(org)
    await test_db.flush()

    test_db.add(OrganizationSubscription(organization_id=org.id, plan_id=test_plan.id, status="active"))
    await test_db.commit()
    return org


@pytest_asyncio.fixture
async def super_admin(test_db: AsyncSession) -> UserProfile:
    """Create super admin profile (not linked to any organization)."""
    profile = UserProfile(
        user_id="admin-1",
        email="root@platform.test",
        first_name="Platform",
        last_name="Operator",
        role="super_admin",
    )
    test_db.add(profile)
    await test_db.commit()
    return profile


@pytest_asyncio.fixture
async def org_members(test_db: AsyncSession, test_organization: Organization) -> list[UserProfile]:
    """Create two profiles ("u1", "u2") linked to the test organization."""
    members = [
        UserProfile(
            user_id="u1",
            email="owner@testorg.com",
            first_name="Org",
            last_name="Owner",
            role="admin",
            current_organization_id=test_organization.id,
        ),
        UserProfile(
            user_id="u2",
            email="member@testorg.com",
            first_name="Org",
            last_name="Member",
            role="employee",
            current_organization_id=test_organization.id,
        ),
    ]
    test_db.add_all(members)
    await test_db.commit()
    return members


@pytest_asyncio.fixture
async def super_admin_token(super_admin: UserProfile) -> str:
    """Create access token for the super admin."""
    return create_access_token(user_id=super_admin.user_id, email=super_admin.email)


@pytest_asyncio.fixture
async def member_token(org_members: list[UserProfile]) -> str:
    """Create access token for a tenant admin (not a super admin)."""
    return create_access_token(user_id=org_members[0].user_id, email=org_members[0].email)


@pytest.fixture
def unknown_token() -> str:
    """Valid token for an account without a profile row."""
    return create_access_token(user_id="ghost", email="ghost@nowhere.test")


@pytest_asyncio.fixture
async def client(
    test_db: AsyncSession, identity_admin: FakeIdentityAdmin
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with database session and identity admin overrides."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_admin] = lambda: identity_admin

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_identity_admin():
    """Factory for fake identity admins with their own failure set."""
    return FakeIdentityAdmin
