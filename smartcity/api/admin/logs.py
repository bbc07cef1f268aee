"""Read access to the audit trail."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from smartcity.api.deps import require
from smartcity.core.database import get_db
from smartcity.schemas.admin import AdminLogItem, ApiResponse
from smartcity.schemas.auth import CallerIdentity
from smartcity.services.audit import recent_admin_logs
from smartcity.services.authorization import Capability

router = APIRouter()


@router.get("/logs", response_model=ApiResponse[list[AdminLogItem]])
def get_admin_logs(
    request: Request,
    _admin: Annotated[CallerIdentity, Depends(require(Capability.ROLE_ADMIN))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[AdminLogItem]]:
    """Most recent audit entries, newest first (admin only)."""
    limit = request.app.state.settings.AUDIT_LOG_PAGE_SIZE
    logs = [AdminLogItem.model_validate(entry) for entry in recent_admin_logs(db, limit)]
    return ApiResponse(success=True, message=f"Retrieved {len(logs)} admin logs", data=logs)
