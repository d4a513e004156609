"""Redis connection backing the shared alert history.

Redis is optional. Without it each process keeps its own alert history in
memory (see `services/alert_history.py`). A failed connection is retried
after `redis_retry_seconds`, so a process that started while Redis was down
moves its alert history onto Redis once it comes back.
"""

import time
from collections.abc import Callable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.workflow_alerts.core.config import get_settings
from src.workflow_alerts.core.logging import get_logger

logger = get_logger(__name__)


class RedisConnection:
    """Lazily connected Redis client with timed reconnect attempts."""

    def __init__(
        self,
        url: str | None,
        pool_size: int = 10,
        retry_after: float = 30.0,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.url = url
        self.pool_size = pool_size
        self.retry_after = retry_after
        self.monotonic = monotonic
        self.client: Redis | None = None
        self._next_attempt: float | None = None

    async def get(self) -> Redis | None:
        """Connected client, or None while Redis is unconfigured or unreachable."""
        if self.client is not None or not self.url:
            return self.client

        now = self.monotonic()
        if self._next_attempt is not None and now < self._next_attempt:
            return None
        self._next_attempt = now + self.retry_after

        client = Redis.from_url(self.url, max_connections=self.pool_size, decode_responses=True)
        try:
            await client.ping()  # type: ignore[misc]
        except (RedisError, OSError) as e:
            await client.aclose()
            logger.warning(
                "Redis unreachable, alert history kept in process memory",
                error=str(e),
                retry_in_seconds=self.retry_after,
            )
            return None

        logger.info("Redis connected", pool_size=self.pool_size)
        self.client = client
        return client

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            logger.info("Redis connection closed")
        self.client = None
        self._next_attempt = None


_connection: RedisConnection | None = None


def _get_connection() -> RedisConnection:
    global _connection
    if _connection is None:
        settings = get_settings()
        if not settings.redis_url:
            logger.info("Redis not configured (REDIS_URL not set)")
        _connection = RedisConnection(
            settings.redis_url,
            pool_size=settings.redis_pool_size,
            retry_after=settings.redis_retry_seconds,
        )
    return _connection


async def get_redis() -> Redis | None:
    """Process-wide Redis client. Returns None if unavailable (graceful degradation)."""
    return await _get_connection().get()


async def close_redis() -> None:
    """Close the Redis client. Call during shutdown."""
    global _connection
    if _connection is not None:
        await _connection.close()
    _connection = None


def reset_redis_state() -> None:
    """Reset Redis state for testing purposes."""
    global _connection
    _connection = None
