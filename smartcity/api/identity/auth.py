"""Registration and login endpoints (public)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from smartcity.api.deps import require
from smartcity.api.identity.dependencies import get_credential_store
from smartcity.core.errors import ServiceError, raise_for_error
from smartcity.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, RegisterResponse
from smartcity.services.authorization import Capability
from smartcity.services.credentials import AuthSession, CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _auth_response(session: AuthSession) -> AuthResponse:
    return AuthResponse(
        token=session.issued.token,
        token_type="bearer",
        user_id=session.user.id,
        username=session.user.username,
        role=session.user.role,
        expires_at=session.issued.expires_at,
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    dependencies=[Depends(require(Capability.PUBLIC))],
)
def register(
    body: RegisterRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> RegisterResponse:
    """
    Create an account and return a token for it.
    Role defaults to Citizen; must be one of Admin, CityPlanner, Citizen.
    """
    result = store.register(body)
    if isinstance(result, ServiceError):
        raise_for_error(result)
    return RegisterResponse(message="User registered successfully", user=_auth_response(result))


@router.post(
    "/login",
    response_model=AuthResponse,
    dependencies=[Depends(require(Capability.PUBLIC))],
)
def login(
    body: LoginRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a bearer token valid for 24 hours.
    Include it in the Authorization header as: Bearer <token>
    """
    result = store.authenticate(body.email, body.password)
    if isinstance(result, ServiceError):
        raise_for_error(result)
    return _auth_response(result)
