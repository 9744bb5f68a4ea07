"""
Identity provider admin API client.

Wraps the privileged account endpoints of the hosted auth service
(``/auth/v1/admin/users``). Every call authenticates with the service role
key, never with a caller's own token.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when the identity provider rejects or fails an admin call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class IdentityAdminClient:
    """Privileged client for the identity provider's admin API.

    Example:
        client = IdentityAdminClient("https://xyz.supabase.co", service_role_key)
        await client.delete_account("6f1c...")
    """

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the admin client.

        Args:
            base_url: Identity provider project URL
            service_role_key: Server-held privileged key
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self._service_role_key = service_role_key
        self.timeout = timeout
        self._transport = transport

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._service_role_key,
            "Authorization": f"Bearer {self._service_role_key}",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def delete_account(self, user_id: str) -> None:
        """Delete an identity account.

        Args:
            user_id: Identity account id

        Raises:
            IdentityProviderError: If the call fails or returns a non-2xx status
        """
        try:
            async with self._client() as client:
                response = await client.delete(f"/auth/v1/admin/users/{user_id}")
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

        if response.is_error:
            raise IdentityProviderError(_error_message(response), status_code=response.status_code)


def _error_message(response: httpx.Response) -> str:
    """Extract the provider's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"Identity provider returned HTTP {response.status_code}"
