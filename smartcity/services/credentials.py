"""Credential store: registration, login and profile maintenance for identity-service users."""

import logging
from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smartcity.core.errors import (
    ServiceError,
    authentication_error,
    conflict_error,
    not_found_error,
)
from smartcity.core.security import PasswordHasher
from smartcity.core.tokens import IssuedToken, TokenIssuer
from smartcity.models.base import utc_now
from smartcity.models.user import User
from smartcity.schemas.auth import RegisterRequest, UserUpdateRequest, derive_username

logger = logging.getLogger(__name__)

# Same text for every registration conflict so the response does not reveal which field collided.
REGISTRATION_CONFLICT_MESSAGE = "User registration failed. Username or email may already exist."
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
EMAIL_IN_USE_MESSAGE = "Email is already in use."


@dataclass(frozen=True)
class AuthSession:
    """A user together with the token just issued for it."""

    user: User
    issued: IssuedToken


class CredentialStore:
    """Owns the users table. One instance per request, bound to that request's session."""

    def __init__(self, db: Session, hasher: PasswordHasher, issuer: TokenIssuer) -> None:
        self.db = db
        self.hasher = hasher
        self.issuer = issuer

    def register(self, body: RegisterRequest) -> AuthSession | ServiceError:
        """
        Create a user and issue a token.

        The pre-check only gives an early answer; the unique constraints on
        email and username are what make concurrent registrations safe.
        """
        username = derive_username(body.first_name, body.last_name)
        existing = (
            self.db.query(User.id)
            .filter(or_(User.email == body.email, User.username == username))
            .first()
        )
        if existing is not None:
            logger.warning("Registration conflict", extra={"username": username})
            return conflict_error(REGISTRATION_CONFLICT_MESSAGE)

        user = User(
            username=username,
            email=body.email,
            password_hash=self.hasher.hash(body.password),
            role=body.role,
            first_name=body.first_name,
            last_name=body.last_name,
            is_active=True,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Registration lost uniqueness race", extra={"username": username})
            return conflict_error(REGISTRATION_CONFLICT_MESSAGE)
        self.db.refresh(user)
        logger.info("User registered", extra={"user_id": user.id, "role": user.role.value})
        return AuthSession(user=user, issued=self.issuer.issue(user))

    def authenticate(self, email: str, password: str) -> AuthSession | ServiceError:
        """
        Verify credentials for an active user and issue a token.

        Unknown email, inactive account and wrong password all produce the same
        failure, and all cost one bcrypt verification.
        """
        user = (
            self.db.query(User)
            .filter(User.email == email.strip(), User.is_active.is_(True))
            .first()
        )
        if user is None:
            self.hasher.verify_dummy(password)
            logger.warning("Login failed")
            return authentication_error(INVALID_CREDENTIALS_MESSAGE)
        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Login failed", extra={"user_id": user.id})
            return authentication_error(INVALID_CREDENTIALS_MESSAGE)

        user.updated_at = utc_now()
        self.db.commit()
        self.db.refresh(user)
        logger.info("Login succeeded", extra={"user_id": user.id})
        return AuthSession(user=user, issued=self.issuer.issue(user))

    def list_users(self) -> list[User]:
        return self.db.query(User).order_by(User.id).all()

    def get_user(self, user_id: int) -> User | ServiceError:
        user = self.db.get(User, user_id)
        if user is None:
            return not_found_error("User not found")
        return user

    def active_user(self, user_id: int) -> User | None:
        """The user if it exists and has not been deactivated."""
        user = self.db.get(User, user_id)
        if user is None or not user.is_active:
            return None
        return user

    def update_user(self, user_id: int, update: UserUpdateRequest) -> User | ServiceError:
        """Apply an already-authorized partial update."""
        user = self.db.get(User, user_id)
        if user is None:
            return not_found_error("User not found")

        fields = update.changed_fields()
        if "email" in fields and update.email != user.email:
            taken = (
                self.db.query(User.id)
                .filter(User.email == update.email, User.id != user_id)
                .first()
            )
            if taken is not None:
                return conflict_error(EMAIL_IN_USE_MESSAGE)
            user.email = update.email
        if "first_name" in fields:
            user.first_name = update.first_name
        if "last_name" in fields:
            user.last_name = update.last_name
        if "role" in fields:
            user.role = update.role
        if "is_active" in fields:
            user.is_active = update.is_active
        if "new_password" in fields:
            user.password_hash = self.hasher.hash(update.new_password)
        user.updated_at = utc_now()

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return conflict_error(EMAIL_IN_USE_MESSAGE)
        self.db.refresh(user)
        logger.info(
            "User updated",
            extra={"user_id": user_id, "fields": ",".join(sorted(fields - {"new_password"}))},
        )
        return user

    def deactivate_user(self, user_id: int) -> User | ServiceError:
        """Soft delete: the row stays, is_active becomes False."""
        user = self.db.get(User, user_id)
        if user is None:
            return not_found_error("User not found")
        if user.is_active:
            user.is_active = False
            user.updated_at = utc_now()
            self.db.commit()
            self.db.refresh(user)
            logger.info("User deactivated", extra={"user_id": user_id})
        return user
