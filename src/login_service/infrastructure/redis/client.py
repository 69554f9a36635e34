"""Redis Client for Login Service

Provides async Redis client management for the session store.
"""

import logging

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisClient:
    """Async Redis client wrapper

    The underlying client opens connections lazily, so it can be handed to
    the session store before connect() runs at startup.
    """

    def __init__(self, url: str):
        """Initialize Redis client

        Args:
            url: redis:// connection URL
        """
        self.url = url
        self._client: redis.Redis = redis.from_url(url, decode_responses=True)
        self._connected = False

    async def connect(self):
        """Verify the connection with PING

        Raises:
            redis.exceptions.RedisError: If Redis is unreachable
        """
        if not self._connected:
            await self._client.ping()
            self._connected = True
            kwargs = self._client.connection_pool.connection_kwargs
            logger.info(
                f"Connected to Redis: {kwargs.get('host')}:{kwargs.get('port')}/{kwargs.get('db')}"
            )

    async def disconnect(self):
        """Close Redis connection"""
        await self._client.aclose()
        self._connected = False
        logger.info("Disconnected from Redis")

    def get_client(self) -> redis.Redis:
        """Get the underlying Redis client

        Returns:
            Redis client instance
        """
        return self._client
