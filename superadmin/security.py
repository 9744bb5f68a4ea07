"""
Caller token utilities.

The hosted identity provider issues HS256 JWTs signed with the project's JWT
secret. This module resolves a caller identity from such a token and can
mint tokens in the same format for local development and tests.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from superadmin.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallerIdentity:
    """Identity resolved from a caller's bearer token."""

    user_id: str
    email: Optional[str] = None


def resolve_caller_from_token(
    token: Optional[str], settings: Optional[Settings] = None
) -> Optional[CallerIdentity]:
    """
    Resolve a caller identity from a bearer token.

    Args:
        token: Raw JWT (without the "Bearer " prefix)
        settings: Settings to read the secret from (defaults to cached settings)

    Returns:
        CallerIdentity, or None if the token is missing, invalid or expired
    """
    if not token:
        return None

    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError as e:
        logger.info(f"Rejected caller token: {e}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    return CallerIdentity(user_id=str(user_id), email=payload.get("email"))


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a caller access token in the identity provider's format.

    Args:
        user_id: Identity account id (becomes the "sub" claim)
        email: User email
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(user_id),
        "email": email,
        "aud": settings.jwt_audience,
        "role": "authenticated",
        "exp": expire,
        "iat": now,
        "jti": str(uuid.uuid4()),
    }

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token part of an "Authorization: Bearer <token>" header."""
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()
