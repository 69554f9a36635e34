"""Session Management

Purpose: Track authenticated principals across requests

A session is created after a successful local or federated login, resolved on
every later request, and destroyed on logout or once its fixed TTL elapses.
Only the user id is kept in the session; the user is re-read from the
datastore on resolve.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from login_service.domain.models import SessionRecord, User
from login_service.infrastructure.auth.session_store import SessionStore
from login_service.infrastructure.auth.user_store import UserStore
from login_service.security import new_session_id

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class SessionManager:
    """Server-side session lifecycle

    Expiry is passive: resolve() rejects and deletes records past
    expires_at, and no background sweep runs.
    """

    def __init__(
        self,
        session_store: SessionStore,
        user_store: UserStore,
        ttl_seconds: int = 24 * 60 * 60,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize session manager

        Args:
            session_store: Backend holding session records
            user_store: Store used to re-resolve principals
            ttl_seconds: Session lifetime from issuance
            clock: Time source (overridable in tests)
        """
        if ttl_seconds <= 0:
            raise ValueError("Session TTL must be positive")
        self.session_store = session_store
        self.user_store = user_store
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock

    @property
    def ttl_seconds(self) -> int:
        return int(self.ttl.total_seconds())

    async def create(self, user: User) -> str:
        """Start a session for an authenticated user

        Args:
            user: Authenticated principal

        Returns:
            New opaque session id

        Raises:
            StoreUnavailable: If the session store fails
        """
        session_id = new_session_id()
        now = self.clock()
        record = SessionRecord(user_id=user.id, created_at=now, expires_at=now + self.ttl)

        await self.session_store.save(session_id, record, self.ttl_seconds)

        logger.info(f"Created session for user {user.id} (expires {record.expires_at.isoformat()})")
        return session_id

    async def resolve(self, session_id: Optional[str]) -> Optional[User]:
        """Look up the user behind a session

        Args:
            session_id: Session id from the request cookie

        Returns:
            User if the session exists, is unexpired and its user still
            exists; None otherwise

        Raises:
            StoreUnavailable: If the session or user store fails
        """
        if not session_id:
            return None

        record = await self.session_store.load(session_id)
        if record is None:
            return None

        if record.is_expired(self.clock()):
            logger.debug(f"Session for user {record.user_id} expired")
            await self.session_store.delete(session_id)
            return None

        user = await self.user_store.find_by_id(record.user_id)
        if user is None:
            logger.warning(f"Session references missing user {record.user_id}")
            await self.session_store.delete(session_id)
        return user

    async def destroy(self, session_id: Optional[str]) -> None:
        """End a session (logout). Unknown ids are ignored."""
        if not session_id:
            return
        await self.session_store.delete(session_id)
        logger.info("Session destroyed")
