"""
Support ticket API routes.

Provides endpoints for:
- Listing and searching tickets across all organizations
- Updating status, priority and assignee
- Reading and posting ticket comments
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from superadmin.database import get_db
from superadmin.middleware.auth import require_super_admin
from superadmin.models import (
    Organization,
    SupportTicket,
    TicketComment,
    TicketPriority,
    TicketStatus,
    UserProfile,
)
from superadmin.models.base import utc_now

router = APIRouter(prefix="/api/v1/admin/tickets", tags=["support"])


# Pydantic schemas
class TicketUpdate(BaseModel):
    """Schema for updating a ticket."""
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    assigned_to: Optional[str] = None


class TicketResponse(BaseModel):
    """Schema for ticket response."""
    id: str
    ticket_number: str
    title: str
    description: str
    priority: str
    status: str
    organization_id: str
    organization_name: Optional[str] = None
    created_by: Optional[str] = None
    creator_email: Optional[str] = None
    assigned_to: Optional[str] = None
    resolved_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CommentCreate(BaseModel):
    """Schema for posting a comment."""
    message: str = Field(..., max_length=10000)
    is_internal: bool = False

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message must not be empty")
        return value.strip()


class CommentResponse(BaseModel):
    """Schema for comment response."""
    id: str
    ticket_id: str
    user_id: Optional[str]
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    message: str
    is_internal: bool
    created_at: datetime


def _ticket_response(ticket: SupportTicket) -> dict:
    return {
        "id": ticket.id,
        "ticket_number": ticket.ticket_number,
        "title": ticket.title,
        "description": ticket.description,
        "priority": ticket.priority,
        "status": ticket.status,
        "organization_id": ticket.organization_id,
        "organization_name": ticket.organization.name if ticket.organization else None,
        "created_by": ticket.created_by,
        "creator_email": ticket.creator.email if ticket.creator else None,
        "assigned_to": ticket.assigned_to,
        "resolved_at": ticket.resolved_at,
        "closed_at": ticket.closed_at,
        "created_at": ticket.created_at,
        "updated_at": ticket.updated_at,
    }


def _comment_response(comment: TicketComment) -> dict:
    return {
        "id": comment.id,
        "ticket_id": comment.ticket_id,
        "user_id": comment.user_id,
        "author_name": comment.author.full_name if comment.author else None,
        "author_email": comment.author.email if comment.author else None,
        "message": comment.message,
        "is_internal": comment.is_internal,
        "created_at": comment.created_at,
    }


async def _get_ticket_or_404(db: AsyncSession, ticket_id: str) -> SupportTicket:
    result = await db.execute(
        select(SupportTicket)
        .options(selectinload(SupportTicket.organization), selectinload(SupportTicket.creator))
        .where(SupportTicket.id == ticket_id)
    )
    ticket = result.scalar_one_or_none()

    if not ticket:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Ticket {ticket_id} not found"
        )

    return ticket


@router.get("", response_model=List[TicketResponse])
async def list_tickets(
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    List support tickets, newest first.

    Args:
        status_filter: Only tickets in this status
        search: Case-insensitive match on ticket number, title or organization name
        skip: Number of records to skip (pagination)
        limit: Maximum number of records to return
    """
    query = (
        select(SupportTicket)
        .join(Organization, SupportTicket.organization_id == Organization.id)
        .options(selectinload(SupportTicket.organization), selectinload(SupportTicket.creator))
    )

    if status_filter:
        query = query.where(SupportTicket.status == status_filter)

    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(
            SupportTicket.ticket_number.ilike(pattern),
            SupportTicket.title.ilike(pattern),
            Organization.name.ilike(pattern),
        ))

    query = query.order_by(SupportTicket.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return [_ticket_response(ticket) for ticket in result.scalars().all()]


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """Get a single ticket."""
    ticket = await _get_ticket_or_404(db, ticket_id)
    return _ticket_response(ticket)


@router.patch("/{ticket_id}", response_model=TicketResponse)
async def update_ticket(
    ticket_id: str,
    ticket_update: TicketUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """
    Update ticket status, priority or assignee.

    Moving a ticket to ``resolved`` or ``closed`` stamps ``resolved_at`` or
    ``closed_at`` the first time it happens.
    """
    ticket = await _get_ticket_or_404(db, ticket_id)

    update_data = ticket_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(ticket, field, value)

    now = utc_now()
    if ticket.status == "resolved" and ticket.resolved_at is None:
        ticket.resolved_at = now
    if ticket.status == "closed" and ticket.closed_at is None:
        ticket.closed_at = now
    ticket.updated_at = now

    await db.commit()

    ticket = await _get_ticket_or_404(db, ticket_id)
    return _ticket_response(ticket)


@router.get("/{ticket_id}/comments", response_model=List[CommentResponse])
async def list_ticket_comments(
    ticket_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """List ticket comments, oldest first."""
    await _get_ticket_or_404(db, ticket_id)

    result = await db.execute(
        select(TicketComment)
        .options(selectinload(TicketComment.author))
        .where(TicketComment.ticket_id == ticket_id)
        .order_by(TicketComment.created_at.asc())
    )
    return [_comment_response(comment) for comment in result.scalars().all()]


@router.post("/{ticket_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket_comment(
    ticket_id: str,
    comment_data: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserProfile = Depends(require_super_admin)
):
    """Post a comment on a ticket as the signed-in super admin."""
    ticket = await _get_ticket_or_404(db, ticket_id)

    comment = TicketComment(
        ticket_id=ticket.id,
        user_id=current_user.user_id,
        message=comment_data.message,
        is_internal=comment_data.is_internal,
    )
    db.add(comment)
    ticket.updated_at = utc_now()

    await db.commit()

    result = await db.execute(
        select(TicketComment)
        .options(selectinload(TicketComment.author))
        .where(TicketComment.id == comment.id)
    )
    return _comment_response(result.scalar_one())
