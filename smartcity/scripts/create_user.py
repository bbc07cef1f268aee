"""
Create a user directly in the identity database (e.g. the first admin). Run from project root:
  python -m smartcity.scripts.create_user EMAIL PASSWORD FIRST_NAME LAST_NAME [role]
Example:
  python -m smartcity.scripts.create_user admin@city.gov your-secure-password Ada Admin Admin
"""
import argparse
import sys

from pydantic import ValidationError

from smartcity.core.config import get_settings
from smartcity.core.database import create_db_engine, create_session_factory
from smartcity.core.errors import ServiceError
from smartcity.core.roles import VALID_ROLE_NAMES
from smartcity.core.security import PasswordHasher
from smartcity.core.tokens import TokenConfig, TokenIssuer
from smartcity.schemas.auth import RegisterRequest
from smartcity.services.credentials import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a SmartCity user without the HTTP API.")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("first_name", help="First name")
    parser.add_argument("last_name", help="Last name")
    parser.add_argument("role", nargs="?", default="Citizen", choices=VALID_ROLE_NAMES)
    args = parser.parse_args(argv)

    try:
        body = RegisterRequest(
            email=args.email,
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            role=args.role,
        )
    except ValidationError as e:
        print(f"Invalid input: {e.errors()[0]['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    session_factory = create_session_factory(create_db_engine(settings.DATABASE_URL))
    db = session_factory()
    try:
        store = CredentialStore(
            db,
            PasswordHasher(settings.BCRYPT_ROUNDS),
            TokenIssuer(TokenConfig.from_settings(settings)),
        )
        result = store.register(body)
        if isinstance(result, ServiceError):
            print(result.message, file=sys.stderr)
            return 1
        print(f"Created user '{result.user.username}' (id={result.user.id}) with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
