"""Admin view of identity-service users, fetched with the caller's own token."""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from smartcity.api.admin.dependencies import get_audit_logger, get_identity_client
from smartcity.api.deps import client_address, require
from smartcity.core.errors import ServiceError, raise_for_error
from smartcity.schemas.admin import ApiResponse
from smartcity.schemas.auth import CallerIdentity, UserOut
from smartcity.services.audit import AuditLogger
from smartcity.services.authorization import Capability
from smartcity.services.identity_client import IdentityServiceClient

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users", response_model=ApiResponse[list[UserOut]])
async def list_users(
    request: Request,
    background_tasks: BackgroundTasks,
    admin: Annotated[CallerIdentity, Depends(require(Capability.ROLE_ADMIN))],
    client: Annotated[IdentityServiceClient, Depends(get_identity_client)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
) -> ApiResponse[list[UserOut]]:
    """
    Proxy GET /auth/users on the identity service.

    The inbound Authorization header is forwarded verbatim, so the identity
    service re-validates and re-authorizes the same caller.
    """
    result = await client.list_users(request.headers.get("Authorization"))
    if isinstance(result, ServiceError):
        logger.error(
            "Failed to retrieve users from identity service",
            extra={"actor_id": admin.user_id, "kind": result.kind.value},
        )
        raise_for_error(result)

    audit.schedule(
        background_tasks,
        actor_id=admin.user_id,
        action="Retrieved user list",
        detail=f"Successfully retrieved {len(result)} users from the identity service",
        source_address=client_address(request),
    )
    return ApiResponse(success=True, message="Users retrieved successfully", data=result)
