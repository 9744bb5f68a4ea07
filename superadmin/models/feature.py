"""
Per-organization feature flags.

One row per (organization, feature_key). Missing rows mean the feature is
enabled.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from superadmin.models.base import Base, new_id, utc_now


class OrganizationFeature(Base):
    """Feature flag toggle for a single organization."""

    __tablename__ = "organization_features"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    feature_key: Mapped[str] = mapped_column(String(100), nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("organization_id", "feature_key", name="uq_org_feature_key"),
    )

    def __repr__(self) -> str:
        return f"<OrganizationFeature(org_id={self.organization_id}, {self.feature_key}={self.is_enabled})>"
