"""Identity service routes."""

from fastapi import APIRouter

from smartcity.api.identity import auth, users

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/auth/users", tags=["users"])
