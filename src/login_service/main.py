"""Login Service

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from login_service.api.cookies import clear_oauth_state_cookie
from login_service.api.routes import auth, pages
from login_service.config.settings import DEFAULT_SESSION_SECRET, Settings, get_settings
from login_service.core.auth import SessionManager, build_authenticator
from login_service.core.auth.google import GoogleOAuthClient
from login_service.domain.errors import (
    InvalidCredentials,
    LoginRequired,
    ProviderError,
    StoreUnavailable,
)
from login_service.infrastructure.auth.session_store import (
    InMemorySessionStore,
    RedisSessionStore,
    SessionStore,
)
from login_service.infrastructure.auth.user_store import UserStore
from login_service.infrastructure.db.database import Database
from login_service.infrastructure.redis.client import RedisClient
from login_service.security import PasswordHasher

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings: Settings = app.state.settings
    database: Database = app.state.database
    redis_client: Optional[RedisClient] = app.state.redis_client

    # Startup
    logger.info(f"Starting {settings.service_name} v{settings.service_version}")
    logger.info(f"Environment: {settings.environment}")

    # The datastore is required; failing to reach it is fatal
    try:
        await database.init_schema()
        logger.info(f"Database connection established: {database.safe_url}")
    except Exception as e:
        logger.error(f"Failed to connect to database: {e}")
        raise

    if redis_client is not None:
        try:
            await redis_client.connect()
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.service_name}")
    if redis_client is not None:
        await redis_client.disconnect()
    await database.close()
    logger.info("Connections closed")


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    session_store: Optional[SessionStore] = None,
    google_client: Optional[GoogleOAuthClient] = None,
) -> FastAPI:
    """Build the application and wire its components.

    Args:
        settings: Configuration (defaults to environment settings)
        database: Datastore handle (defaults to one built from settings)
        session_store: Session backend (defaults per SESSION_BACKEND)
        google_client: Google OAuth client (defaults per GOOGLE_* settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning(
            "Using default SESSION_SECRET! "
            "Set SESSION_SECRET environment variable in production!"
        )

    database = database or Database(settings.resolved_database_url, echo=settings.sql_echo)
    user_store = UserStore(database)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    redis_client: Optional[RedisClient] = None
    if session_store is None:
        if settings.session_backend == "redis":
            redis_client = RedisClient(settings.redis_url)
            session_store = RedisSessionStore(redis_client.get_client())
        elif settings.session_backend == "memory":
            session_store = InMemorySessionStore()
        else:
            raise ValueError(
                f"Unknown SESSION_BACKEND: {settings.session_backend}. "
                f"Valid options: memory, redis"
            )

    if google_client is None and settings.google_enabled:
        google_client = GoogleOAuthClient(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_callback_url,
        )

    app = FastAPI(
        title="Login Service",
        version=settings.service_version,
        description="Email/password and Google sign-in with server-side sessions",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.redis_client = redis_client
    app.state.user_store = user_store
    app.state.hasher = hasher
    app.state.session_store = session_store
    app.state.session_manager = SessionManager(
        session_store, user_store, ttl_seconds=settings.session_ttl_seconds
    )
    app.state.authenticator = build_authenticator(user_store, hasher)
    app.state.google_client = google_client

    app.include_router(pages.router)
    app.include_router(auth.router)

    @app.get("/health")
    async def health_check():
        """Datastore and session store health"""
        database_ok = await user_store.ping()
        sessions_ok = await session_store.ping()
        return {
            "status": "healthy" if database_ok and sessions_ok else "degraded",
            "service": settings.service_name,
            "version": settings.service_version,
            "services": {
                "database": "healthy" if database_ok else "unhealthy",
                "session_store": "healthy" if sessions_ok else "unhealthy",
                "google_oauth": "configured" if google_client else "disabled",
            },
        }

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)

    @app.exception_handler(InvalidCredentials)
    async def invalid_credentials_handler(request: Request, exc: InvalidCredentials):
        return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)

    @app.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError):
        logger.warning(f"Google sign-in failed: {exc}")
        response = RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)
        clear_oauth_state_cookie(response, settings)
        return response

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error(f"Request to {request.url.path} aborted: {exc}")
        return PlainTextResponse(
            "Service temporarily unavailable. Please try again later.",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return PlainTextResponse(
            "An unexpected error occurred. Please try again later.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "login_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
