"""
User profile and employee models.

A user profile links an identity provider account (``user_id``) to the
organization the user currently works in. Deprovisioning enumerates profiles
by ``current_organization_id`` to find the identity accounts to delete, since
the relational cascade cannot reach into the identity provider.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from superadmin.models.base import Base, new_id, utc_now


class UserProfile(Base):
    """Profile row for an identity provider account."""

    __tablename__ = "user_profiles"

    # Identity provider account id
    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # super_admin, admin, employee, ...
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    current_organization_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<UserProfile(user_id={self.user_id}, role={self.role}, org_id={self.current_organization_id})>"

    @property
    def full_name(self) -> Optional[str]:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or None


class Employee(Base):
    """Employee record of a tenant (counted on the organization details view)."""

    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, org_id={self.organization_id})>"
