"""ORM model for user accounts owned by the identity service."""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String

from smartcity.core.roles import Role
from smartcity.models.base import Base, utc_now

USERNAME_MAX_LEN = 100


class User(Base):
    """
    User account for token authentication and role-based access control.

    username is derived from first and last name at registration. Both username
    and email carry unique constraints; concurrent registrations race on the
    constraint, not on a read-then-write check. Rows are never deleted;
    is_active=False is the soft delete.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(USERNAME_MAX_LEN), nullable=False, unique=True, index=True)
    email = Column(String(200), nullable=False, unique=True, index=True)
    password_hash = Column(String(500), nullable=False)
    role = Column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            create_constraint=False,
            length=50,
            values_callable=lambda roles: [r.value for r in roles],
            validate_strings=True,
        ),
        nullable=False,
        default=Role.CITIZEN,
    )
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
