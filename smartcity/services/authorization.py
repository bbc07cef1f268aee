"""Authorization decisions: capability checks, ownership, self-protection and field-level rules.

Every decision is re-derived from validated claims on each request; nothing is
cached between requests.
"""

from enum import Enum

from smartcity.core.errors import (
    ServiceError,
    authentication_error,
    authorization_error,
)
from smartcity.core.roles import Role
from smartcity.core.tokens import TokenFailure, TokenValidator
from smartcity.schemas.auth import CallerIdentity, UserUpdateRequest

# Fields only an Admin may set, on anyone's profile.
ADMIN_ONLY_FIELDS = frozenset({"role", "is_active"})


class Capability(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED_ANY = "authenticated_any"
    ROLE_ADMIN = "role_admin"


class AuthorizationGuard:
    """Maps validated token claims to allow/deny decisions per operation."""

    def __init__(self, validator: TokenValidator) -> None:
        self._validator = validator

    def authenticate(self, token: str | None) -> CallerIdentity | ServiceError:
        """Validate a bearer token and return the caller identity it encodes."""
        if not token:
            return authentication_error("Not authenticated")
        result = self._validator.validate(token)
        if isinstance(result, TokenFailure):
            return authentication_error(result.message)
        return CallerIdentity(user_id=result.user_id, username=result.name, role=result.role)

    def authorize(
        self,
        capability: Capability,
        identity: CallerIdentity | None,
    ) -> CallerIdentity | None | ServiceError:
        """Check that the (possibly absent) identity satisfies the required capability."""
        if capability is Capability.PUBLIC:
            return identity
        if identity is None:
            return authentication_error("Not authenticated")
        if capability is Capability.ROLE_ADMIN and identity.role is not Role.ADMIN:
            return authorization_error("Admin access required")
        return identity

    def check_deactivate(self, caller: CallerIdentity, target_id: int) -> ServiceError | None:
        """Soft delete requires Admin and is never allowed on the caller's own account."""
        if caller.role is not Role.ADMIN:
            return authorization_error("Admin access required")
        if caller.user_id == target_id:
            return authorization_error("You cannot delete or deactivate your own account.")
        return None

    def check_profile_update(
        self,
        caller: CallerIdentity,
        target_id: int,
        update: UserUpdateRequest,
    ) -> ServiceError | None:
        """
        Apply ownership and field-level rules to a partial profile update.

        Non-admins may touch only their own profile, and never role or active
        status. Nobody may deactivate themselves or set another user's password.
        """
        is_self = caller.user_id == target_id
        fields = update.changed_fields()
        if caller.role is not Role.ADMIN:
            if not is_self:
                return authorization_error("You may only update your own profile.")
            if fields & ADMIN_ONLY_FIELDS:
                return authorization_error(
                    "Only administrators may change role or active status."
                )
        if is_self and update.is_active is False:
            return authorization_error("You cannot delete or deactivate your own account.")
        if "new_password" in fields and not is_self:
            return authorization_error("Passwords can only be changed by their owner.")
        return None
