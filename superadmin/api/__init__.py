"""
Super admin console API routes.

Provides REST API endpoints for:
- Organization deprovisioning (function-style endpoint)
- Console session check
- Organization management and feature flags
- Support tickets
- Error logs
- Analytics
"""

from superadmin.api.analytics import router as analytics_router
from superadmin.api.auth import router as auth_router
from superadmin.api.error_logs import router as error_logs_router
from superadmin.api.functions import router as functions_router
from superadmin.api.organizations import router as organizations_router
from superadmin.api.tickets import router as tickets_router

__all__ = [
    "functions_router",
    "auth_router",
    "organizations_router",
    "tickets_router",
    "error_logs_router",
    "analytics_router",
]
