"""
Privileged (service-level) client.

Holds the server-held service role key and performs operations that bypass
per-tenant access policy: organization lookup and removal, linked profile
enumeration and identity account deletion.

The only way to obtain an instance is PrivilegedClient.elevate(), which
requires an AuthorizedCaller, so elevated capability is unreachable before
the authorization gate has passed.
"""

import logging
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from superadmin.clients.caller import AuthorizedCaller
from superadmin.clients.identity import IdentityAdminClient
from superadmin.config.settings import Settings, get_settings
from superadmin.errors import Misconfiguration
from superadmin.models import (
    Employee,
    ErrorLog,
    Organization,
    OrganizationFeature,
    OrganizationSubscription,
    SupportTicket,
    TicketComment,
    UserProfile,
)

logger = logging.getLogger(__name__)

_ELEVATION_TOKEN = object()


class PrivilegedClient:
    """Service-role handle for destructive cross-tenant operations."""

    def __init__(
        self,
        db: AsyncSession,
        identity_admin: IdentityAdminClient,
        acting_for: AuthorizedCaller,
        _token: object = None,
    ):
        if _token is not _ELEVATION_TOKEN:
            raise TypeError("PrivilegedClient must be created with PrivilegedClient.elevate()")
        self._db = db
        self._identity_admin = identity_admin
        self.acting_for = acting_for

    @classmethod
    def elevate(
        cls,
        caller: AuthorizedCaller,
        db: AsyncSession,
        settings: Optional[Settings] = None,
        identity_admin: Optional[IdentityAdminClient] = None,
    ) -> "PrivilegedClient":
        """
        Construct a privileged client on behalf of an authorized caller.

        Args:
            caller: Caller that passed the authorization gate
            db: Database session
            settings: Settings holding the service role key
            identity_admin: Optional pre-built identity admin client

        Returns:
            PrivilegedClient

        Raises:
            TypeError: If caller is not an AuthorizedCaller
            Misconfiguration: If the service role key is absent
        """
        if not isinstance(caller, AuthorizedCaller):
            raise TypeError("Privilege elevation requires an AuthorizedCaller")

        settings = settings or get_settings()
        if not settings.service_role_key:
            logger.error("Service role key is missing from the environment")
            raise Misconfiguration("Server misconfiguration: Service Role Key is missing")

        if identity_admin is None:
            identity_admin = IdentityAdminClient(
                settings.supabase_url,
                settings.service_role_key,
                timeout=settings.identity_request_timeout,
            )

        logger.info(f"Privileged client elevated for caller {caller.user_id}")
        return cls(db, identity_admin, caller, _token=_ELEVATION_TOKEN)

    async def get_organization(self, organization_id: str) -> Optional[Organization]:
        """Fetch an organization by id (None if absent)."""
        result = await self._db.execute(
            select(Organization).where(Organization.id == organization_id)
        )
        return result.scalar_one_or_none()

    async def list_linked_profiles(self, organization_id: str) -> list[UserProfile]:
        """All user profiles whose current organization is the given one."""
        result = await self._db.execute(
            select(UserProfile).where(UserProfile.current_organization_id == organization_id)
        )
        return list(result.scalars().all())

    async def delete_account(self, user_id: str) -> None:
        """Delete an identity account (raises IdentityProviderError on failure)."""
        await self._identity_admin.delete_account(user_id)

    async def delete_organization(self, organization_id: str, purge_dependents: bool = False) -> None:
        """
        Delete the organization record.

        Args:
            organization_id: Organization id
            purge_dependents: Remove dependent rows explicitly in the same
                transaction instead of relying on foreign key cascades

        Raises:
            SQLAlchemyError: If the delete fails (the transaction is rolled back)
        """
        try:
            if purge_dependents:
                await self.purge_dependents(organization_id)
            await self._db.execute(delete(Organization).where(Organization.id == organization_id))
            await self._db.commit()
        except SQLAlchemyError:
            await self._db.rollback()
            raise

    async def purge_dependents(self, organization_id: str) -> None:
        """Delete rows that depend on the organization and detach its error logs (no commit)."""
        ticket_ids = select(SupportTicket.id).where(SupportTicket.organization_id == organization_id)
        await self._db.execute(delete(TicketComment).where(TicketComment.ticket_id.in_(ticket_ids)))
        await self._db.execute(delete(SupportTicket).where(SupportTicket.organization_id == organization_id))
        await self._db.execute(
            delete(OrganizationFeature).where(OrganizationFeature.organization_id == organization_id)
        )
        await self._db.execute(delete(Employee).where(Employee.organization_id == organization_id))
        await self._db.execute(
            delete(OrganizationSubscription).where(
                OrganizationSubscription.organization_id == organization_id
            )
        )
        await self._db.execute(
            delete(UserProfile).where(UserProfile.current_organization_id == organization_id)
        )
        await self._db.execute(
            update(ErrorLog)
            .where(ErrorLog.organization_id == organization_id)
            .values(organization_id=None)
        )
        logger.info(f"Purged dependent rows of organization {organization_id}")
