"""
Clients for the external collaborators.

- CallerClient: scoped to the invoking session (authentication, role lookup)
- PrivilegedClient: service-role handle, reachable only from an AuthorizedCaller
- IdentityAdminClient: identity provider admin API
"""

from superadmin.clients.caller import AuthorizedCaller, CallerClient
from superadmin.clients.identity import IdentityAdminClient, IdentityProviderError
from superadmin.clients.privileged import PrivilegedClient

__all__ = [
    "AuthorizedCaller",
    "CallerClient",
    "IdentityAdminClient",
    "IdentityProviderError",
    "PrivilegedClient",
]
