"""User administration endpoints: list, fetch, partial update, soft delete."""

from typing import Annotated

from fastapi import APIRouter, Depends

from smartcity.api.deps import get_guard
from smartcity.api.identity.dependencies import get_credential_store, require_active
from smartcity.core.errors import ServiceError, raise_for_error
from smartcity.schemas.auth import CallerIdentity, MessageResponse, UserOut, UserUpdateRequest
from smartcity.services.authorization import AuthorizationGuard, Capability
from smartcity.services.credentials import CredentialStore

router = APIRouter()


@router.get(
    "",
    response_model=list[UserOut],
    dependencies=[Depends(require_active(Capability.ROLE_ADMIN))],
)
def list_users(
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> list[UserOut]:
    """List all users, active or not (admin only)."""
    return [UserOut.model_validate(u) for u in store.list_users()]


@router.get(
    "/{user_id}",
    response_model=UserOut,
    dependencies=[Depends(require_active(Capability.ROLE_ADMIN))],
)
def get_user(
    user_id: int,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> UserOut:
    result = store.get_user(user_id)
    if isinstance(result, ServiceError):
        raise_for_error(result)
    return UserOut.model_validate(result)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    caller: Annotated[CallerIdentity, Depends(require_active(Capability.AUTHENTICATED_ANY))],
    guard: Annotated[AuthorizationGuard, Depends(get_guard)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> UserOut:
    """
    Partial profile update.

    Anyone may edit their own name, email and password. Only admins may edit
    other users, and only admins may change role or active status.
    """
    denied = guard.check_profile_update(caller, user_id, body)
    if denied is not None:
        raise_for_error(denied)
    result = store.update_user(user_id, body)
    if isinstance(result, ServiceError):
        raise_for_error(result)
    return UserOut.model_validate(result)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    caller: Annotated[CallerIdentity, Depends(require_active(Capability.ROLE_ADMIN))],
    guard: Annotated[AuthorizationGuard, Depends(get_guard)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> MessageResponse:
    """Deactivate a user (admin only; never the caller's own account)."""
    denied = guard.check_deactivate(caller, user_id)
    if denied is not None:
        raise_for_error(denied)
    result = store.deactivate_user(user_id)
    if isinstance(result, ServiceError):
        raise_for_error(result)
    return MessageResponse(message="User deactivated")
