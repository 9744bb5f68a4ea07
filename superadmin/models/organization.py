"""
Organization model for multi-tenant SaaS.

Each organization represents a separate tenant/customer. The row is created
by the product's signup flow and removed only by the deprovisioning workflow.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from superadmin.models.base import Base, new_id, utc_now


class Organization(Base):
    """
    Organization (Tenant) model.

    Dependent tables reference organizations.id with ON DELETE CASCADE
    (SET NULL for error logs), so removing the row removes tenant data.
    """

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    # Organization details
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False
    )

    # Relationships
    subscriptions: Mapped[list["OrganizationSubscription"]] = relationship(
        "OrganizationSubscription",
        back_populates="organization",
        passive_deletes=True,
        order_by="OrganizationSubscription.created_at.desc()",
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name})>"

    @property
    def current_subscription(self) -> Optional["OrganizationSubscription"]:
        """Most recent subscription, if any."""
        return self.subscriptions[0] if self.subscriptions else None


class SubscriptionPlan(Base):
    """Billing plan an organization can subscribe to."""

    __tablename__ = "subscription_plans"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<SubscriptionPlan(id={self.id}, name={self.name})>"


class OrganizationSubscription(Base):
    """Links an organization to a subscription plan."""

    __tablename__ = "organization_subscriptions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    plan_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("subscription_plans.id", ondelete="RESTRICT"),
        nullable=True
    )
    status: Mapped[str] = mapped_column(String(30), default="active")  # active, trialing, past_due, canceled
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    organization: Mapped["Organization"] = relationship("Organization", back_populates="subscriptions")
    plan: Mapped[Optional["SubscriptionPlan"]] = relationship("SubscriptionPlan", lazy="joined")

    def __repr__(self) -> str:
        return f"<OrganizationSubscription(org_id={self.organization_id}, plan_id={self.plan_id})>"
