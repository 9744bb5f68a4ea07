"""
Database models for the super admin console.

These models mirror the hosted relational store:
- Organizations (tenants), plans and subscriptions
- User profiles linking identity accounts to organizations
- Feature flags
- Support tickets and comments
- Application error logs
"""

from superadmin.models.base import Base
from superadmin.models.organization import Organization, OrganizationSubscription, SubscriptionPlan
from superadmin.models.user_profile import Employee, UserProfile
from superadmin.models.feature import OrganizationFeature
from superadmin.models.support import SupportTicket, TicketComment, TicketPriority, TicketStatus
from superadmin.models.error_log import ErrorLog, ErrorSeverity

__all__ = [
    "Base",
    "Organization",
    "OrganizationSubscription",
    "SubscriptionPlan",
    "UserProfile",
    "Employee",
    "OrganizationFeature",
    "SupportTicket",
    "TicketComment",
    "TicketPriority",
    "TicketStatus",
    "ErrorLog",
    "ErrorSeverity",
]
