"""
Database engine and session management.

Wraps an async SQLAlchemy engine and session factory in an explicit handle
that is created by the application factory and passed to the user store.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from login_service.infrastructure.db.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Async datastore handle"""

    def __init__(self, url: str, echo: bool = False, pooled: bool = True):
        """
        Args:
            url: SQLAlchemy async URL (postgresql+asyncpg://..., sqlite+aiosqlite://...)
            echo: Log emitted SQL
            pooled: Use a connection pool (disable for tests)
        """
        self.url = url
        kwargs = {"echo": echo, "pool_pre_ping": True}
        if not pooled:
            kwargs["poolclass"] = NullPool
        self.engine: AsyncEngine = create_async_engine(url, **kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Don't expire objects after commit
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session for a single store call.

        Rolls back on error and always closes.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def init_schema(self) -> None:
        """
        Create the users table if it does not exist.

        Fails loudly if the datastore cannot be reached.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def drop_schema(self) -> None:
        """
        Drop all tables.

        WARNING: This will delete all data!
        Should only be used in development/testing.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> bool:
        """Check datastore connectivity"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def close(self) -> None:
        """Dispose of pooled connections"""
        await self.engine.dispose()

    @property
    def safe_url(self) -> str:
        """URL with the password masked, for logging"""
        return self.engine.url.render_as_string(hide_password=True)
