"""Auth dependencies shared by both services.

Every route declares the capability it needs with ``require(Capability.X)``.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from smartcity.core.errors import ServiceError, raise_for_error
from smartcity.schemas.auth import CallerIdentity
from smartcity.services.authorization import AuthorizationGuard, Capability

security = HTTPBearer(auto_error=False)


def get_guard(request: Request) -> AuthorizationGuard:
    return request.app.state.guard


def authenticate_caller(
    credentials: HTTPAuthorizationCredentials | None,
    guard: AuthorizationGuard,
) -> CallerIdentity:
    """Validate the bearer token and return the caller. Raises 401 otherwise."""
    token = credentials.credentials if credentials is not None else None
    identity = guard.authenticate(token)
    if isinstance(identity, ServiceError):
        raise_for_error(identity)
    return identity


def authorize_caller(
    guard: AuthorizationGuard,
    capability: Capability,
    identity: CallerIdentity | None,
) -> CallerIdentity | None:
    """Check the capability for an already-authenticated (or anonymous) caller. Raises 401/403."""
    result = guard.authorize(capability, identity)
    if isinstance(result, ServiceError):
        raise_for_error(result)
    return result


def require(capability: Capability) -> Callable[..., CallerIdentity | None]:
    """
    Dependency factory: the caller must satisfy ``capability``.

    Public operations resolve to None without looking at the token; all others
    resolve to the CallerIdentity from the validated token.
    """

    def dependency(
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
        guard: Annotated[AuthorizationGuard, Depends(get_guard)],
    ) -> CallerIdentity | None:
        if capability is Capability.PUBLIC:
            return authorize_caller(guard, capability, None)
        return authorize_caller(guard, capability, authenticate_caller(credentials, guard))

    return dependency


def client_address(request: Request) -> str | None:
    """Network address of the direct peer, if the server knows it."""
    return request.client.host if request.client else None
