"""Admin service entrypoint. Wiring and middleware only.

Run with: uvicorn smartcity.admin_main:create_app --factory --port 5001
"""

from dotenv import load_dotenv

load_dotenv()

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartcity import __version__
from smartcity.api.admin import router as admin_router
from smartcity.api.errors import register_envelope_exception_handlers
from smartcity.core.config import Settings, get_settings
from smartcity.core.database import create_db_engine, create_session_factory
from smartcity.core.logging_config import configure_logging
from smartcity.core.tokens import TokenConfig, TokenValidator
from smartcity.services.audit import AuditLogger
from smartcity.services.authorization import AuthorizationGuard
from smartcity.services.identity_client import IdentityServiceClient


def create_app(
    settings: Settings | None = None,
    identity_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the admin service.

    It validates tokens itself with the shared TokenConfig and never reads the
    users table; user data comes from the identity service.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="SmartCity Admin API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    session_factory = create_session_factory(engine)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.guard = AuthorizationGuard(TokenValidator(TokenConfig.from_settings(settings)))
    app.state.audit_logger = AuditLogger(session_factory)
    app.state.identity_client = IdentityServiceClient(
        settings.IDENTITY_SERVICE_URL,
        settings.IDENTITY_REQUEST_TIMEOUT_SEC,
        api_prefix=settings.API_PREFIX,
        transport=identity_transport,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_envelope_exception_handlers(app)
    app.include_router(admin_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "SmartCity Admin API"}

    return app
