"""
Console session API routes.

Sign-in happens against the identity provider; the console only checks
that the presented token belongs to a super admin.
"""

from fastapi import APIRouter, Depends

from superadmin.middleware.auth import require_super_admin
from superadmin.models import UserProfile

router = APIRouter(prefix="/api/v1/admin", tags=["authentication"])


@router.get("/me", response_model=dict)
async def get_current_user_info(current_user: UserProfile = Depends(require_super_admin)):
    """
    Get the signed-in super admin's profile.

    Args:
        current_user: Super admin resolved from the bearer token

    Returns:
        Profile fields used by the console header
    """
    return {
        "user_id": current_user.user_id,
        "email": current_user.email,
        "full_name": current_user.full_name,
        "role": current_user.role,
        "is_active": current_user.is_active,
    }
