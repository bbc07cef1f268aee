"""System settings endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from smartcity.api.admin.dependencies import get_audit_logger
from smartcity.api.deps import client_address, require
from smartcity.core.database import get_db
from smartcity.schemas.admin import ApiResponse, SystemSettingItem, SystemSettingRequest
from smartcity.schemas.auth import CallerIdentity
from smartcity.services.audit import AuditLogger
from smartcity.services.authorization import Capability
from smartcity.services.settings_store import list_settings, upsert_setting

router = APIRouter()


@router.post("/settings", response_model=ApiResponse[SystemSettingItem])
def update_system_setting(
    body: SystemSettingRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    admin: Annotated[CallerIdentity, Depends(require(Capability.ROLE_ADMIN))],
    db: Annotated[Session, Depends(get_db)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
) -> ApiResponse[SystemSettingItem]:
    """Create or overwrite one setting; the change is recorded in the audit trail."""
    setting = upsert_setting(db, body, actor_id=admin.user_id)
    audit.schedule(
        background_tasks,
        actor_id=admin.user_id,
        action="Updated system setting",
        detail=f"Updated setting '{setting.key}' to '{setting.value}'",
        source_address=client_address(request),
    )
    return ApiResponse(
        success=True,
        message="System setting updated successfully",
        data=SystemSettingItem.model_validate(setting),
    )


@router.get("/settings", response_model=ApiResponse[list[SystemSettingItem]])
def get_system_settings(
    _admin: Annotated[CallerIdentity, Depends(require(Capability.ROLE_ADMIN))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[SystemSettingItem]]:
    settings = [SystemSettingItem.model_validate(s) for s in list_settings(db)]
    return ApiResponse(
        success=True,
        message=f"Retrieved {len(settings)} system settings",
        data=settings,
    )
