"""Identity service entrypoint. Wiring and middleware only.

Run with: uvicorn smartcity.identity_main:create_app --factory --port 5000
"""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartcity import __version__
from smartcity.api.errors import register_exception_handlers
from smartcity.api.identity import router as identity_router
from smartcity.core.config import Settings, get_settings
from smartcity.core.database import create_db_engine, create_session_factory
from smartcity.core.logging_config import configure_logging
from smartcity.core.security import PasswordHasher
from smartcity.core.tokens import TokenConfig, TokenIssuer, TokenValidator
from smartcity.services.authorization import AuthorizationGuard


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the identity service. Settings and token config are fixed for the app's lifetime."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="SmartCity Identity API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    token_config = TokenConfig.from_settings(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.password_hasher = PasswordHasher(settings.BCRYPT_ROUNDS)
    app.state.token_issuer = TokenIssuer(token_config)
    app.state.guard = AuthorizationGuard(TokenValidator(token_config))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(identity_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "SmartCity Identity API"}

    return app
