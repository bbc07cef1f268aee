"""Admin service routes."""

from fastapi import APIRouter

from smartcity.api.admin import logs, settings, users

router = APIRouter()
router.include_router(users.router, prefix="/admin", tags=["admin"])
router.include_router(logs.router, prefix="/admin", tags=["admin"])
router.include_router(settings.router, prefix="/admin", tags=["admin"])
