"""
Deprovisioning error taxonomy.

Every kind is surfaced to the caller through the same failure envelope
(HTTP 400, ``{"error": ..., "details": ...}``); callers tell kinds apart by
the message only.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from superadmin.services.deprovisioning import DeprovisionReport

FAILURE_DETAILS = "Check server logs for more info"


class DeprovisioningError(Exception):
    """Base class for deprovisioning failures."""

    kind = "deprovisioning_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_envelope(self) -> dict:
        """Uniform failure envelope returned to the caller."""
        return {"error": self.message, "details": FAILURE_DETAILS}


class Unauthorized(DeprovisioningError):
    """No caller identity, or the caller is not a super admin.

    ``authenticated`` is True when the identity resolved but the role gate failed.
    """

    kind = "unauthorized"

    def __init__(self, message: str, authenticated: bool = False):
        super().__init__(message)
        self.authenticated = authenticated


class InvalidRequest(DeprovisioningError):
    """Request body is unparseable or the organization id is missing."""

    kind = "invalid_request"


class Misconfiguration(DeprovisioningError):
    """The server-held privileged secret is absent."""

    kind = "misconfiguration"


class NotFound(DeprovisioningError):
    """The organization does not exist or could not be looked up."""

    kind = "not_found"


class DeletionFailed(DeprovisioningError):
    """The final organization delete failed."""

    kind = "deletion_failed"

    def __init__(self, message: str, report: Optional["DeprovisionReport"] = None):
        super().__init__(message)
        self.report = report
