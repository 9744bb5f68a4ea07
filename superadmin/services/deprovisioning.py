"""
Organization Deprovisioning Service

Removes an organization and every identity account linked to it, on behalf
of a verified super admin.

Pipeline (each step may end the run with a DeprovisioningError):

    authenticate -> authorize -> validate input -> elevate privilege
    -> resolve organization -> enumerate linked accounts
    -> purge accounts (best-effort) -> delete organization (fatal) -> done

Two failure policies apply:
- account purge: every failure is logged and recorded as an AccountOutcome,
  the loop always runs to the end;
- organization delete: a failure aborts the run with DeletionFailed.

Calls are issued one at a time, in order. There are no retries and no lock:
a second run for the same organization id ends with NotFound.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from superadmin.clients.caller import AuthorizedCaller, CallerClient
from superadmin.clients.identity import IdentityAdminClient, IdentityProviderError
from superadmin.clients.privileged import PrivilegedClient
from superadmin.config.settings import Settings, get_settings
from superadmin.errors import DeletionFailed, InvalidRequest, NotFound
from superadmin.models import Organization, UserProfile

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Organization and associated accounts deleted successfully"


@dataclass
class AccountOutcome:
    """Result of deleting one linked identity account (informational only)."""

    user_id: str
    deleted: bool
    error: Optional[str] = None


@dataclass
class DeprovisionReport:
    """Aggregated result of a deprovisioning run."""

    organization_id: str
    organization_name: Optional[str] = None
    accounts: list[AccountOutcome] = field(default_factory=list)
    enumeration_error: Optional[str] = None
    organization_deleted: bool = False

    @property
    def failed_accounts(self) -> list[AccountOutcome]:
        return [outcome for outcome in self.accounts if not outcome.deleted]

    @property
    def message(self) -> str:
        return SUCCESS_MESSAGE


def parse_organization_id(body: Any) -> Optional[str]:
    """
    Extract ``organizationId`` from a raw request body.

    Args:
        body: Raw JSON body (bytes or str) or an already decoded object

    Returns:
        The organization id, or None when the body carries none

    Raises:
        InvalidRequest: If the body is not valid JSON
    """
    if isinstance(body, (bytes, bytearray, str)):
        try:
            body = json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            logger.error(f"Failed to parse request body: {e}")
            raise InvalidRequest("Invalid request body") from e

    if not isinstance(body, dict):
        return None

    logger.info(f"Received deprovisioning request for organization {body.get('organizationId')!r}")
    return body.get("organizationId")


def require_organization_id(organization_id: Any) -> str:
    """Validate the organization id (non-empty string)."""
    if organization_id is None:
        raise InvalidRequest("Organization ID is required")
    if not isinstance(organization_id, str):
        raise InvalidRequest("Organization ID must be a string")
    if not organization_id.strip():
        raise InvalidRequest("Organization ID is required")
    return organization_id.strip()


class DeprovisioningService:
    """Runs the organization deprovisioning workflow for one request."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Optional[Settings] = None,
        identity_admin: Optional[IdentityAdminClient] = None,
    ):
        """
        Args:
            db: Database session for this request
            settings: Application settings (defaults to cached settings)
            identity_admin: Optional identity admin client handed to the
                privileged client (tests inject fakes here)
        """
        self.db = db
        self.settings = settings or get_settings()
        self.identity_admin = identity_admin

    async def deprovision(self, caller_token: Optional[str], organization_id: Any) -> DeprovisionReport:
        """
        Deprovision an organization.

        Args:
            caller_token: Bearer token of the invoking session
            organization_id: Organization to remove

        Returns:
            DeprovisionReport

        Raises:
            Unauthorized, InvalidRequest, Misconfiguration, NotFound, DeletionFailed
        """
        caller = await self._authorize(caller_token)
        return await self._execute(caller, require_organization_id(organization_id))

    async def deprovision_request(self, caller_token: Optional[str], body: Any) -> DeprovisionReport:
        """Same workflow, reading the organization id from a raw request body.

        The body is parsed only after the caller has been authorized.
        """
        caller = await self._authorize(caller_token)
        organization_id = require_organization_id(parse_organization_id(body))
        return await self._execute(caller, organization_id)

    async def _authorize(self, caller_token: Optional[str]) -> AuthorizedCaller:
        return await CallerClient(caller_token, self.db, self.settings).authorize()

    async def _execute(self, caller: AuthorizedCaller, organization_id: str) -> DeprovisionReport:
        privileged = PrivilegedClient.elevate(
            caller, self.db, self.settings, identity_admin=self.identity_admin
        )

        organization = await self._resolve_organization(privileged, organization_id)
        logger.info(f"Deleting organization: {organization.name} ({organization.id})")

        report = DeprovisionReport(organization_id=organization.id, organization_name=organization.name)

        profiles = await self._enumerate_accounts(privileged, organization_id, report)
        await self._purge_accounts(privileged, profiles, report)
        await self._delete_organization(privileged, organization_id, report)

        logger.info(
            f"Organization {organization_id} deprovisioned by {caller.user_id}: "
            f"{len(report.accounts) - len(report.failed_accounts)}/{len(report.accounts)} accounts deleted"
        )
        return report

    async def _resolve_organization(self, privileged: PrivilegedClient, organization_id: str) -> Organization:
        try:
            organization = await privileged.get_organization(organization_id)
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching organization {organization_id}: {e}")
            raise NotFound(f"Database Error: {e}") from e

        if organization is None:
            logger.error(f"Organization not found with ID: {organization_id}")
            raise NotFound("Organization not found")

        return organization

    async def _enumerate_accounts(
        self, privileged: PrivilegedClient, organization_id: str, report: DeprovisionReport
    ) -> list[UserProfile]:
        # Broken profile linkage must not block removal of the organization
        try:
            return await privileged.list_linked_profiles(organization_id)
        except SQLAlchemyError as e:
            logger.error(f"Error finding linked users of organization {organization_id}: {e}")
            report.enumeration_error = str(e)
            await self.db.rollback()
            return []

    async def _purge_accounts(
        self, privileged: PrivilegedClient, profiles: list[UserProfile], report: DeprovisionReport
    ) -> None:
        user_ids = [profile.user_id for profile in profiles if profile.user_id]

        for user_id in user_ids:
            logger.info(f"Deleting identity account: {user_id}")
            try:
                await privileged.delete_account(user_id)
            except IdentityProviderError as e:
                logger.error(f"Failed to delete identity account {user_id}: {e.message}")
                report.accounts.append(AccountOutcome(user_id=user_id, deleted=False, error=e.message))
                continue
            report.accounts.append(AccountOutcome(user_id=user_id, deleted=True))

    async def _delete_organization(
        self, privileged: PrivilegedClient, organization_id: str, report: DeprovisionReport
    ) -> None:
        try:
            await privileged.delete_organization(
                organization_id, purge_dependents=self.settings.explicit_cascade_cleanup
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete organization {organization_id}: {e}")
            raise DeletionFailed(f"Failed to delete organization: {e}", report=report) from e

        report.organization_deleted = True
