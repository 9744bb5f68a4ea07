"""
Authentication and authorization dependencies for the dashboard API.

Provides FastAPI dependencies for:
- Bearer token resolution
- Super admin gate (the only role admitted to the console)
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from superadmin.clients.caller import CallerClient
from superadmin.config.settings import get_settings
from superadmin.database import get_db
from superadmin.errors import Unauthorized
from superadmin.models import UserProfile

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)

SUPER_ADMIN_REQUIRED = "Access denied. Super admin privileges required."


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_caller_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Extract the bearer token from the Authorization header.

    Raises:
        HTTPException: 401 if the header is missing or not a bearer credential
    """
    if credentials is None or not credentials.credentials:
        raise _credentials_exception()
    return credentials.credentials


async def require_super_admin(
    token: str = Depends(get_caller_token),
    db: AsyncSession = Depends(get_db),
) -> UserProfile:
    """
    Require the caller to be a super admin.

    Args:
        token: Caller bearer token
        db: Database session

    Returns:
        The caller's profile

    Raises:
        HTTPException: 401 if the token does not resolve, 403 for any other role
    """
    client = CallerClient(token, db, get_settings())
    try:
        caller = await client.authorize()
    except Unauthorized as e:
        if not e.authenticated:
            raise _credentials_exception()
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SUPER_ADMIN_REQUIRED)

    result = await db.execute(select(UserProfile).where(UserProfile.user_id == caller.user_id))
    return result.scalar_one()
