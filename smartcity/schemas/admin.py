"""Request/response schemas for the admin service."""

from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for every admin-service success response."""

    success: bool = True
    message: str = ""
    data: T | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class AdminLogItem(BaseModel):
    """Audit entry as returned by GET /admin/logs."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    action: str
    details: str
    ip_address: str
    timestamp: datetime


class SystemSettingRequest(BaseModel):
    key: str = Field(..., max_length=100)
    value: str = Field(..., max_length=500)
    description: str = Field(default="", max_length=200)

    @field_validator("key", "value")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Key and Value are required")
        return v.strip()


class SystemSettingItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    value: str
    description: str
    updated_by: int
    updated_at: datetime
