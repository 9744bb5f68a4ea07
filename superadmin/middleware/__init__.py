"""
Authentication and authorization middleware for the dashboard API.
"""

from .auth import SUPER_ADMIN_REQUIRED, get_caller_token, require_super_admin

__all__ = [
    "SUPER_ADMIN_REQUIRED",
    "get_caller_token",
    "require_super_admin",
]
