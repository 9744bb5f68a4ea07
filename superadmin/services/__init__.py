"""Domain services for the super admin console."""

from superadmin.services.deprovisioning import (
    SUCCESS_MESSAGE,
    AccountOutcome,
    DeprovisioningService,
    DeprovisionReport,
)

__all__ = [
    "SUCCESS_MESSAGE",
    "AccountOutcome",
    "DeprovisionReport",
    "DeprovisioningService",
]
