"""
Caller-scoped client.

Operates with the caller's own credentials only: it can resolve who the
caller is and read the caller's own profile role. It has no delete
capability; privileged operations live on PrivilegedClient, which can only be
obtained from an AuthorizedCaller.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from superadmin.config.settings import Settings, get_settings
from superadmin.errors import Unauthorized
from superadmin.models import UserProfile
from superadmin.security import CallerIdentity, resolve_caller_from_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorizedCaller:
    """A caller that passed both the authentication and the role gate.

    Only CallerClient.authorize() creates instances.
    """

    identity: CallerIdentity
    role: str

    @property
    def user_id(self) -> str:
        return self.identity.user_id


class CallerClient:
    """Client bound to the invoking session's credentials."""

    def __init__(self, token: Optional[str], db: AsyncSession, settings: Optional[Settings] = None):
        self._token = token
        self._db = db
        self.settings = settings or get_settings()

    async def get_user(self) -> Optional[CallerIdentity]:
        """Resolve the caller identity from the session token."""
        return resolve_caller_from_token(self._token, self.settings)

    async def get_role(self, user_id: str) -> Optional[str]:
        """Read the caller's own profile role."""
        result = await self._db.execute(
            select(UserProfile.role).where(UserProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def authorize(self, required_role: Optional[str] = None) -> AuthorizedCaller:
        """
        Run the authentication and role gates.

        Args:
            required_role: Role the caller must hold (defaults to the super admin role)

        Returns:
            AuthorizedCaller for the invoking session

        Raises:
            Unauthorized: If no identity resolves or the role does not match
        """
        required_role = required_role or self.settings.super_admin_role

        identity = await self.get_user()
        if identity is None:
            raise Unauthorized("Unauthorized")

        role = await self.get_role(identity.user_id)
        if role != required_role:
            logger.warning(f"Caller {identity.user_id} has role {role!r}, {required_role!r} required")
            raise Unauthorized(
                "Unauthorized: Only Super Admins can perform this action",
                authenticated=True,
            )

        return AuthorizedCaller(identity=identity, role=role)
