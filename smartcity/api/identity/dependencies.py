"""Identity-service dependencies: the credential store and capability checks against live user rows."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from smartcity.api.deps import authenticate_caller, authorize_caller, get_guard, security
from smartcity.core.database import get_db
from smartcity.core.errors import authentication_error, raise_for_error
from smartcity.schemas.auth import CallerIdentity
from smartcity.services.authorization import AuthorizationGuard, Capability
from smartcity.services.credentials import CredentialStore

INACTIVE_CALLER_MESSAGE = "User not found or inactive"


def get_credential_store(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> CredentialStore:
    state = request.app.state
    return CredentialStore(db, state.password_hasher, state.token_issuer)


def require_active(capability: Capability) -> Callable[..., CallerIdentity]:
    """
    Dependency factory for authenticated identity-service routes.

    The identity service owns the users table, so besides validating the token
    it refuses deactivated or missing accounts and authorizes against the
    stored role rather than the one in the token.
    """

    def dependency(
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
        guard: Annotated[AuthorizationGuard, Depends(get_guard)],
        store: Annotated[CredentialStore, Depends(get_credential_store)],
    ) -> CallerIdentity:
        identity = authenticate_caller(credentials, guard)
        user = store.active_user(identity.user_id)
        if user is None:
            raise_for_error(authentication_error(INACTIVE_CALLER_MESSAGE))
        if user.role is not identity.role:
            identity = identity.model_copy(update={"role": user.role})
        authorize_caller(guard, capability, identity)
        return identity

    return dependency
