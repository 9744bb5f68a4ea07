"""
Function-style endpoints.

``POST /functions/v1/delete-account`` runs the organization deprovisioning
workflow. Every failure, whatever its kind, is answered with HTTP 400 and
``{"error": ..., "details": ...}``; success is HTTP 200 with ``{"message": ...}``.
All origins are permitted and preflight requests get an empty success.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from superadmin.clients.identity import IdentityAdminClient
from superadmin.config.settings import get_settings
from superadmin.database import get_db
from superadmin.errors import FAILURE_DETAILS, DeletionFailed, DeprovisioningError
from superadmin.security import extract_bearer_token
from superadmin.services.deprovisioning import DeprovisioningService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_identity_admin() -> Optional[IdentityAdminClient]:
    """Identity admin client override point (None builds one from settings)."""
    return None


def _failure(envelope: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope,
        headers=CORS_HEADERS,
    )


@router.options("/delete-account")
async def delete_account_preflight():
    """Answer CORS preflight requests."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/delete-account")
async def delete_account(
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity_admin: Optional[IdentityAdminClient] = Depends(get_identity_admin),
):
    """
    Deprovision an organization.

    Removes every identity account linked to the organization, then the
    organization record. Only super admins may call it.

    Request body:
        {"organizationId": "<id>"}

    Returns:
        200 {"message": "Organization and associated accounts deleted successfully"}
        400 {"error": "<message>", "details": "..."} on any failure
    """
    token = extract_bearer_token(request.headers.get("authorization"))
    service = DeprovisioningService(db, get_settings(), identity_admin=identity_admin)

    try:
        body = await request.body()
        report = await service.deprovision_request(token, body)
    except DeletionFailed as e:
        failed = len(e.report.failed_accounts) if e.report else 0
        logger.error(
            f"Deprovisioning aborted at organization delete "
            f"({failed} account deletions had failed): {e.message}"
        )
        return _failure(e.to_envelope())
    except DeprovisioningError as e:
        logger.error(f"Deprovisioning failed ({e.kind}): {e.message}")
        return _failure(e.to_envelope())
    except Exception as e:
        logger.error(f"Unexpected deprovisioning error: {e}", exc_info=True)
        return _failure({"error": str(e) or e.__class__.__name__, "details": FAILURE_DETAILS})

    if report.failed_accounts:
        logger.warning(
            f"Organization {report.organization_id} deleted, "
            f"{len(report.failed_accounts)} identity accounts could not be removed: "
            f"{[outcome.user_id for outcome in report.failed_accounts]}"
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"message": report.message},
        headers=CORS_HEADERS,
    )
