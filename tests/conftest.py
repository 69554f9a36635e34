"""
Pytest configuration and fixtures for login service tests.

Provides fixtures for:
- Settings and a file-based SQLite datastore
- User store, password hasher and session manager
- A Google OAuth client backed by httpx.MockTransport
- The application and an async test client
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from login_service.config.settings import Settings
from login_service.core.auth import SessionManager, build_authenticator
from login_service.core.auth.google import GoogleOAuthClient
from login_service.infrastructure.auth.session_store import InMemorySessionStore
from login_service.infrastructure.auth.user_store import UserStore
from login_service.infrastructure.db.database import Database
from login_service.main import create_app
from login_service.security import PasswordHasher

TEST_SESSION_SECRET = "test-session-secret"
TEST_PASSWORD = "correct horse battery staple"

# Unreachable datastore: opening the file fails on first use
UNREACHABLE_DATABASE_URL = "sqlite+aiosqlite:////nonexistent-dir/login/test_db.sqlite"


class FakeClock:
    """Manually advanced UTC clock for session expiry tests"""

    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Test settings (no .env, SQLite datastore, fast bcrypt)"""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test_db.sqlite'}",
        session_secret=TEST_SESSION_SECRET,
        session_backend="memory",
        bcrypt_rounds=4,
        google_client_id=None,
        google_client_secret=None,
    )


@pytest_asyncio.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    """Create test datastore with the users table."""
    db = Database(settings.resolved_database_url, pooled=False)
    await db.init_schema()

    yield db

    await db.drop_schema()
    await db.close()


@pytest_asyncio.fixture
async def unreachable_database() -> AsyncGenerator[Database, None]:
    db = Database(UNREACHABLE_DATABASE_URL, pooled=False)
    yield db
    await db.close()


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def user_store(database) -> UserStore:
    return UserStore(database)


@pytest.fixture
def hasher() -> PasswordHasher:
    """Minimum bcrypt cost keeps the suite fast"""
    return PasswordHasher(rounds=4)


@pytest.fixture
def authenticator(user_store, hasher):
    return build_authenticator(user_store, hasher)


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_manager(session_store, user_store, clock) -> SessionManager:
    return SessionManager(session_store, user_store, ttl_seconds=3600, clock=clock)


@pytest_asyncio.fixture
async def test_user(user_store, hasher):
    """Local account with TEST_PASSWORD"""
    return await user_store.insert_user("alice@example.com", hasher.hash(TEST_PASSWORD))


@pytest.fixture
def google_profile() -> dict:
    """Userinfo returned by the fake Google endpoint (mutable per test)"""
    return {"sub": "1234567890", "email": "gina@example.com", "email_verified": True}


@pytest.fixture
def google_client(google_profile) -> GoogleOAuthClient:
    """Google client whose token and userinfo calls hit a mock transport"""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "oauth2.googleapis.com":
            return httpx.Response(200, json={"access_token": "test-access-token", "token_type": "Bearer"})
        if request.url.host == "www.googleapis.com":
            if request.headers.get("Authorization") != "Bearer test-access-token":
                return httpx.Response(401, json={"error": "invalid_token"})
            return httpx.Response(200, json=google_profile)
        return httpx.Response(404)

    return GoogleOAuthClient(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="http://test/auth/google/secrets",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def app(settings, database, session_store, google_client):
    """Application wired to the test datastore and in-memory sessions"""
    return create_app(
        settings,
        database=database,
        session_store=session_store,
        google_client=google_client,
    )


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client (redirects are not followed)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
