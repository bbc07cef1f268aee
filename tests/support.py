"""Shared builders for service tests: settings, apps, users and tokens."""

from types import SimpleNamespace

import httpx
from fastapi import FastAPI
from fastapi.testclient import TestClient

from smartcity.admin_main import create_app as create_admin_app
from smartcity.core.config import Settings
from smartcity.core.roles import Role
from smartcity.identity_main import create_app as create_identity_app
from smartcity.models import Base

TEST_SECRET = "test-signing-secret-with-at-least-32-bytes"
DEFAULT_PASSWORD = "secret1"


def make_settings(**overrides: object) -> Settings:
    """Settings for an isolated in-memory service; fast bcrypt."""
    values: dict[str, object] = {
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": TEST_SECRET,
        "BCRYPT_ROUNDS": 4,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_identity_app(**overrides: object) -> FastAPI:
    app = create_identity_app(make_settings(**overrides))
    Base.metadata.create_all(app.state.engine)
    return app


def make_admin_app(identity_app: FastAPI | None = None, **overrides: object) -> FastAPI:
    """Admin app whose identity-service calls go straight to identity_app in-process."""
    transport = httpx.ASGITransport(app=identity_app) if identity_app is not None else None
    app = create_admin_app(make_settings(**overrides), identity_transport=transport)
    Base.metadata.create_all(app.state.engine)
    return app


def register(
    client: TestClient,
    email: str,
    first_name: str = "Test",
    last_name: str | None = None,
    role: str = "Citizen",
    password: str = DEFAULT_PASSWORD,
) -> dict:
    """Register through the API and return the AuthResponse body; asserts success."""
    response = client.post(
        "/api/auth/register",
        json={
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": last_name or email.split("@")[0],
            "role": role,
        },
    )
    assert response.status_code == 200, response.text
    return response.json()["user"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def token_subject(user_id: int = 1, username: str = "Ada Lovelace", role: Role = Role.CITIZEN) -> SimpleNamespace:
    """Minimal object with the attributes TokenIssuer reads."""
    return SimpleNamespace(id=user_id, username=username, role=role)
