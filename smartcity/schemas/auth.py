"""Request/response schemas for the identity service."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from smartcity.core.roles import VALID_ROLE_NAMES, Role
from smartcity.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from smartcity.models.user import USERNAME_MAX_LEN

# One @, no whitespace, a dot in the domain.
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _normalize_email(v: str) -> str:
    v = v.strip()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Invalid email address.")
    return v


def _strip_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be blank.")
    return v


def derive_username(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}".strip()


def _coerce_role(v: object) -> object:
    """Accept role names case-insensitively; anything outside the set fails enum validation."""
    if isinstance(v, str):
        for name in VALID_ROLE_NAMES:
            if v.strip().lower() == name.lower():
                return name
    return v


class RegisterRequest(BaseModel):
    """New account. Username is derived from first and last name."""

    email: str = Field(..., max_length=200)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Role = Field(default=Role.CITIZEN, description="One of Admin, CityPlanner, Citizen")

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, v: object) -> object:
        return _coerce_role(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return _strip_name(v)

    @model_validator(mode="after")
    def check_username_length(self) -> "RegisterRequest":
        if len(derive_username(self.first_name, self.last_name)) > USERNAME_MAX_LEN:
            raise ValueError(f"Full name must not exceed {USERNAME_MAX_LEN} characters.")
        return self


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=200)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class AuthResponse(BaseModel):
    """Bearer token plus the identity it was issued for."""

    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: int
    username: str
    role: Role
    expires_at: datetime


class RegisterResponse(BaseModel):
    message: str
    user: AuthResponse


class UserOut(BaseModel):
    """User as exposed to admins (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: Role
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    email: str | None = Field(default=None, max_length=200)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    role: Role | None = None
    new_password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    is_active: bool | None = None

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, v: object) -> object:
        return _coerce_role(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _normalize_email(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_name(v)

    def changed_fields(self) -> set[str]:
        """Fields the client actually supplied with a non-null value."""
        return {name for name in self.model_fields_set if getattr(self, name) is not None}


class MessageResponse(BaseModel):
    message: str


class CallerIdentity(BaseModel):
    """Authenticated caller, derived from validated token claims and passed into handlers."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    role: Role
