"""Session Storage

Purpose: Persist server-side session records

Records are keyed by the SHA-256 hash of the session id, so the raw id that
travels in the cookie is never stored.

Backends:
- InMemorySessionStore: single-process deployments and tests
- RedisSessionStore: shared storage with Redis-side expiry

Storage Schema (Redis):
- login:session:{session_hash} -> {session_record_json}  (SETEX ttl)
"""

import asyncio
import hashlib
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from login_service.domain.errors import StoreUnavailable
from login_service.domain.models import SessionRecord

logger = logging.getLogger(__name__)


def hash_session_id(session_id: str) -> str:
    """Generate SHA-256 hash of a session id"""
    return hashlib.sha256(session_id.encode()).hexdigest()


class SessionStore(ABC):
    """Storage contract for session records."""

    @abstractmethod
    async def save(self, session_id: str, record: SessionRecord, ttl_seconds: int) -> None:
        """Store a record that expires after ttl_seconds."""
        pass

    @abstractmethod
    async def load(self, session_id: str) -> Optional[SessionRecord]:
        """Fetch a record, or None if absent."""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Remove a record. Missing ids are ignored."""
        pass

    async def ping(self) -> bool:
        return True


class InMemorySessionStore(SessionStore):
    """Process-local session storage.

    WARNING: Sessions are lost on restart and not shared between instances.
    Expiry is enforced by the Session Manager on resolve; records whose
    cookie never comes back are purged on the next save.
    """

    def __init__(self):
        self._records: Dict[str, SessionRecord] = {}
        self._lock = asyncio.Lock()

    async def save(self, session_id: str, record: SessionRecord, ttl_seconds: int) -> None:
        async with self._lock:
            self._purge_expired(record.created_at)
            self._records[hash_session_id(session_id)] = record

    def _purge_expired(self, now: datetime) -> None:
        """Drop records past expires_at (caller holds the lock)"""
        expired = [key for key, stored in self._records.items() if stored.is_expired(now)]
        for key in expired:
            del self._records[key]
        if expired:
            logger.debug(f"Purged {len(expired)} expired sessions")

    async def load(self, session_id: str) -> Optional[SessionRecord]:
        async with self._lock:
            return self._records.get(hash_session_id(session_id))

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._records.pop(hash_session_id(session_id), None)

    def __len__(self) -> int:
        return len(self._records)


class RedisSessionStore(SessionStore):
    """Redis-backed session storage"""

    def __init__(self, redis_client: Redis):
        """Initialize session store

        Args:
            redis_client: Redis connection for session storage
        """
        self.redis = redis_client
        self.session_key_pattern = "login:session:{}"

    async def save(self, session_id: str, record: SessionRecord, ttl_seconds: int) -> None:
        key = self.session_key_pattern.format(hash_session_id(session_id))
        try:
            await self.redis.setex(key, ttl_seconds, json.dumps(record.to_dict()))
        except RedisError as e:
            logger.error(f"Redis SETEX failed for session: {e}")
            raise StoreUnavailable("Session store unavailable") from e

    async def load(self, session_id: str) -> Optional[SessionRecord]:
        key = self.session_key_pattern.format(hash_session_id(session_id))
        try:
            data = await self.redis.get(key)
        except RedisError as e:
            logger.error(f"Redis GET failed for session: {e}")
            raise StoreUnavailable("Session store unavailable") from e

        if not data:
            return None
        try:
            return SessionRecord.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding malformed session record: {e}")
            return None

    async def delete(self, session_id: str) -> None:
        key = self.session_key_pattern.format(hash_session_id(session_id))
        try:
            await self.redis.delete(key)
        except RedisError as e:
            logger.error(f"Redis DELETE failed for session: {e}")
            raise StoreUnavailable("Session store unavailable") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False
