"""Pydantic request/response schemas."""

from smartcity.schemas.admin import (
    AdminLogItem,
    ApiResponse,
    SystemSettingItem,
    SystemSettingRequest,
)
from smartcity.schemas.auth import (
    AuthResponse,
    CallerIdentity,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
    UserUpdateRequest,
)

__all__ = [
    "AdminLogItem",
    "ApiResponse",
    "AuthResponse",
    "CallerIdentity",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "RegisterResponse",
    "SystemSettingItem",
    "SystemSettingRequest",
    "UserOut",
    "UserUpdateRequest",
]
