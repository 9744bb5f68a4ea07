"""
Seed data script for local development.

Creates a super admin profile, subscription plans, sample organizations with
members, support tickets and error logs, then prints a bearer token for the
super admin so the console API can be exercised right away.
"""

import asyncio
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select

from superadmin.config.settings import get_settings
from superadmin.database import AsyncSessionLocal, init_db
from superadmin.models import (
    Employee,
    ErrorLog,
    Organization,
    OrganizationFeature,
    OrganizationSubscription,
    SubscriptionPlan,
    SupportTicket,
    TicketComment,
    UserProfile,
)
from superadmin.models.base import utc_now
from superadmin.security import create_access_token


async def seed_database():
    """Create seed data for development."""

    print("🌱 Seeding database with sample data...")

    async with AsyncSessionLocal() as db:
        # Check if data already exists
        result = await db.execute(select(Organization))
        if result.scalars().first():
            print("⚠️  Database already has data. Skipping seed.")
            return None

        now = utc_now()

        # Create Super Admin
        print("\n🔐 Creating super admin...")
        super_admin = UserProfile(
            user_id=str(uuid4()),
            email="root@platform.local",
            first_name="Platform",
            last_name="Operator",
            role=get_settings().super_admin_role,
        )
        db.add(super_admin)
        await db.commit()
        print(f"  ✅ Created {super_admin.email}")

        # Create Plans
        print("\n💳 Creating subscription plans...")
        starter = SubscriptionPlan(name="Starter", description="Up to 10 employees", price=Decimal("0"))
        professional = SubscriptionPlan(name="Professional", description="Up to 100 employees", price=Decimal("49"))
        enterprise = SubscriptionPlan(name="Enterprise", description="Unlimited employees", price=Decimal("199"))
        db.add_all([starter, professional, enterprise])
        await db.commit()
        print(f"  ✅ Created {starter.name}, {professional.name}, {enterprise.name}")

        # Create Organizations
        print("\n📦 Creating organizations...")
        acme = Organization(
            name="Acme Corporation",
            email="admin@acme.com",
            phone="+1 555 0100",
            website="https://acme.example",
            created_at=now - timedelta(days=75),
        )
        techstart = Organization(
            name="TechStart Inc",
            email="info@techstart.io",
            created_at=now - timedelta(days=20),
        )
        dormant = Organization(
            name="Dormant Ltd",
            email="hello@dormant.example",
            is_active=False,
            created_at=now - timedelta(days=140),
        )
        db.add_all([acme, techstart, dormant])
        await db.commit()
        for organization in (acme, techstart, dormant):
            print(f"  ✅ Created {organization.name}")

        db.add_all([
            OrganizationSubscription(organization_id=acme.id, plan_id=professional.id),
            OrganizationSubscription(organization_id=techstart.id, plan_id=starter.id, status="trialing"),
            OrganizationSubscription(organization_id=dormant.id, plan_id=enterprise.id, status="canceled"),
        ])

        # Create Members
        print("\n👥 Creating organization members...")
        members = [
            UserProfile(
                user_id=str(uuid4()), email="owner@acme.com", first_name="John", last_name="Doe",
                role="admin", current_organization_id=acme.id,
            ),
            UserProfile(
                user_id=str(uuid4()), email="hr@acme.com", first_name="Mary", last_name="Major",
                role="employee", current_organization_id=acme.id,
            ),
            UserProfile(
                user_id=str(uuid4()), email="founder@techstart.io", first_name="Jane", last_name="Smith",
                role="admin", current_organization_id=techstart.id,
            ),
        ]
        db.add_all(members)
        db.add_all([
            Employee(organization_id=acme.id, full_name="John Doe", email="owner@acme.com"),
            Employee(organization_id=acme.id, full_name="Mary Major", email="hr@acme.com"),
            Employee(organization_id=techstart.id, full_name="Jane Smith", email="founder@techstart.io"),
        ])
        db.add(OrganizationFeature(organization_id=techstart.id, feature_key="payroll", is_enabled=False))
        await db.commit()
        print(f"  ✅ Created {len(members)} members")

        # Create Support Tickets
        print("\n🎫 Creating support tickets...")
        ticket = SupportTicket(
            organization_id=acme.id,
            ticket_number="TKT-0001",
            title="Payroll export fails",
            description="Exporting the October payroll returns an error.",
            priority="high",
            created_by=members[0].user_id,
        )
        db.add(ticket)
        await db.commit()
        db.add(TicketComment(ticket_id=ticket.id, user_id=members[0].user_id, message="Still failing this morning."))
        await db.commit()
        print(f"  ✅ Created {ticket.ticket_number}")

        # Create Error Logs
        print("\n🐞 Creating error logs...")
        db.add_all([
            ErrorLog(
                organization_id=acme.id,
                organization_name=acme.name,
                user_id=members[1].user_id,
                user_email=members[1].email,
                user_name=members[1].full_name,
                error_message="TypeError: Cannot read properties of undefined (reading 'map')",
                error_type="runtime",
                page_url="/payroll",
                severity="error",
            ),
            ErrorLog(
                organization_id=techstart.id,
                organization_name=techstart.name,
                error_message="Request to /rest/v1/attendance timed out",
                error_type="network",
                severity="warning",
                context_data={"status": 504},
            ),
        ])
        await db.commit()
        print("  ✅ Created 2 error logs")

        super_admin_id = super_admin.user_id
        super_admin_email = super_admin.email

    print("\n✅ Database seeded successfully!")
    print("\n📊 Summary:")
    print("  - 1 super admin")
    print("  - 3 subscription plans")
    print("  - 3 organizations")
    print(f"  - {len(members)} members")
    print("  - 1 support ticket")
    print("  - 2 error logs")

    return create_access_token(super_admin_id, email=super_admin_email)


async def main():
    """Main entry point."""
    # Initialize database schema
    print("🔧 Initializing database schema...")
    await init_db()
    print("✅ Database schema created")

    # Seed data
    token = await seed_database()
    if token:
        print("\n🔑 Super admin bearer token:")
        print(f"  {token}")


if __name__ == "__main__":
    asyncio.run(main())
