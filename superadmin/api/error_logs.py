"""
Application error log API routes.
"""

from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from superadmin.database import get_db
from superadmin.middleware.auth import require_super_admin
from superadmin.models import ErrorLog, ErrorSeverity, UserProfile
from superadmin.models.base import utc_now

router = APIRouter(prefix="/api/v1/admin/error-logs", tags=["error logs"])


# Pydantic schemas
class ErrorLogResponse(BaseModel):
    """Schema for error log response."""
    id: str
    organization_id: Optional[str]
    organization_name: Optional[str]
    user_id: Optional[str]
    user_email: Optional[str]
    user_name: Optional[str]
    error_message: str
    error_stack: Optional[str]
    error_type: str
    page_url: Optional[str]
    user_agent: Optional[str]
    severity: str
    is_resolved: bool
    resolved_at: Optional[datetime]
    resolved_by: Optional[str]
    notes: Optional[str]
    metadata: Optional[dict[str, Any]] = Field(None, validation_alias="context_data")
    created_at: datetime

    class Config:
        from_attributes = True


class ResolveRequest(BaseModel):
    """Schema for resolving an error log."""
    notes: Optional[str] = Field(None, max_length=5000)


@router.get("", response_model=List[ErrorLogResponse])
async def list_error_logs(
    unresolved_only: bool = True,
    severity: Optional[ErrorSeverity] = None,
    search: Optional[str] = None,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    List error logs, newest first.

    Args:
        unresolved_only: Hide resolved errors (default)
        severity: Only errors of this severity
        search: Case-insensitive match on message, user email or organization name
        limit: Maximum number of records to return
    """
    query = select(ErrorLog)

    if unresolved_only:
        query = query.where(ErrorLog.is_resolved.is_(False))

    if severity:
        query = query.where(ErrorLog.severity == severity)

    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(
            ErrorLog.error_message.ilike(pattern),
            ErrorLog.user_email.ilike(pattern),
            ErrorLog.organization_name.ilike(pattern),
        ))

    query = query.order_by(ErrorLog.created_at.desc()).limit(limit)
    result = await db.execute(query)

    return result.scalars().all()


@router.post("/{error_id}/resolve", response_model=ErrorLogResponse)
async def resolve_error_log(
    error_id: str,
    resolve_data: Optional[ResolveRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    Mark an error as resolved by the signed-in super admin.

    Raises:
        HTTPException: If error log not found
    """
    result = await db.execute(select(ErrorLog).where(ErrorLog.id == error_id))
    error_log = result.scalar_one_or_none()

    if not error_log:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Error log {error_id} not found"
        )

    error_log.is_resolved = True
    error_log.resolved_at = utc_now()
    error_log.resolved_by = current_user.user_id
    if resolve_data and resolve_data.notes is not None:
        error_log.notes = resolve_data.notes

    await db.commit()
    await db.refresh(error_log)

    return error_log
