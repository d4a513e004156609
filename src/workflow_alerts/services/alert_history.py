"""Alert history - time-windowed memory of alerts already sent.

Each record is keyed by (workflow, step, tier) and holds the time the alert
was last sent. The scanner consults it to hold back repeat alerts within the
tier's cooldown. Records are transient: losing them (restart, Redis flush)
at worst re-sends one alert per step.
"""

import asyncio
import weakref
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol
from uuid import UUID

from redis.asyncio import Redis

from src.workflow_alerts.core.config import Settings, get_settings
from src.workflow_alerts.core.logging import get_logger
from src.workflow_alerts.core.redis import get_redis
from src.workflow_alerts.models import AlertTier
from src.workflow_alerts.models.base import Clock, utc_now

logger = get_logger(__name__)

PREFIX_ALERT_HISTORY = "alert_history"


@dataclass(frozen=True)
class AlertKey:
    workflow_id: UUID
    step_id: str
    tier: AlertTier

    def __str__(self) -> str:
        return f"{self.workflow_id}:{self.step_id}:{self.tier.value}"


class AlertHistoryBackend(Protocol):
    async def get(self, key: str) -> datetime | None: ...

    async def set(self, key: str, sent_at: datetime) -> None: ...

    async def purge(self, older_than: datetime) -> int: ...


class InMemoryAlertHistoryBackend:
    """Process-local backend; contents are lost on restart.

    Records are kept oldest-first, and every write evicts those that have
    fallen out of the retention window, so memory stays bounded even when
    no purge job runs in this process.
    """

    def __init__(self, retention: timedelta | None = None) -> None:
        if retention is None:
            retention = timedelta(days=get_settings().alert_history_retention_days)
        self.retention = retention
        self._records: OrderedDict[str, datetime] = OrderedDict()

    async def get(self, key: str) -> datetime | None:
        return self._records.get(key)

    async def set(self, key: str, sent_at: datetime) -> None:
        self._records[key] = sent_at
        self._records.move_to_end(key)
        cutoff = sent_at - self.retention
        while self._records:
            oldest, oldest_sent_at = next(iter(self._records.items()))
            if oldest_sent_at >= cutoff:
                break
            del self._records[oldest]

    async def purge(self, older_than: datetime) -> int:
        stale = [key for key, sent_at in self._records.items() if sent_at < older_than]
        for key in stale:
            del self._records[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._records)


class RedisAlertHistoryBackend:
    """Redis backend shared by every process using the same Redis.

    Records are written with a TTL equal to the retention window, so Redis
    expires them itself and purge has nothing to do.
    """

    def __init__(self, redis: Redis, retention: timedelta):
        self.redis = redis
        self.ttl = int(retention.total_seconds())

    async def get(self, key: str) -> datetime | None:
        value = await self.redis.get(f"{PREFIX_ALERT_HISTORY}:{key}")
        if value is None:
            return None
        return datetime.fromisoformat(value)

    async def set(self, key: str, sent_at: datetime) -> None:
        await self.redis.setex(f"{PREFIX_ALERT_HISTORY}:{key}", self.ttl, sent_at.isoformat())

    async def purge(self, older_than: datetime) -> int:
        return 0


class AlertHistory:
    """Cooldown checks over an alert history backend.

    Time comes from the injected clock so cooldown boundaries can be tested
    without sleeping.
    """

    def __init__(
        self,
        backend: AlertHistoryBackend,
        clock: Clock = utc_now,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.backend = backend
        self.clock = clock
        self.cooldowns = {
            AlertTier.WARNING: timedelta(hours=settings.alert_warning_cooldown_hours),
            AlertTier.URGENT: timedelta(hours=settings.alert_urgent_cooldown_hours),
            AlertTier.OVERDUE: timedelta(hours=settings.alert_overdue_cooldown_hours),
        }
        self.retention = timedelta(days=settings.alert_history_retention_days)
        # Held weakly: a lock lives only while some task holds or awaits it
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock(self, key: AlertKey) -> asyncio.Lock:
        """Lock held across check, emit and mark for one key."""
        name = str(key)
        lock = self._locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[name] = lock
        return lock

    async def has_recent_alert(self, key: AlertKey) -> bool:
        """True if this alert was sent within its tier's cooldown."""
        sent_at = await self.backend.get(str(key))
        if sent_at is None:
            return False
        return self.clock() - sent_at < self.cooldowns[key.tier]

    async def mark_sent(self, key: AlertKey) -> None:
        await self.backend.set(str(key), self.clock())

    async def purge(self, retention: timedelta | None = None) -> int:
        """Delete records older than the retention window, whatever their tier.

        Returns:
            Number of records removed
        """
        cutoff = self.clock() - (retention or self.retention)
        removed = await self.backend.purge(cutoff)
        logger.info("Alert history purged", removed=removed, cutoff=cutoff.isoformat())
        return removed


_alert_history: AlertHistory | None = None
_alert_history_redis: Redis | None = None


async def get_alert_history() -> AlertHistory:
    """Process-wide alert history, over Redis when available, else in memory.

    One instance per process so that the per-key locks are shared by every
    scan and completion running in it. Rebuilt if the Redis client changes.
    """
    global _alert_history, _alert_history_redis

    redis = await get_redis()
    if _alert_history is not None and redis is _alert_history_redis:
        return _alert_history

    settings = get_settings()
    if redis is not None:
        backend: AlertHistoryBackend = RedisAlertHistoryBackend(
            redis, timedelta(days=settings.alert_history_retention_days)
        )
        logger.info("Alert history using Redis")
    else:
        backend = InMemoryAlertHistoryBackend(
            timedelta(days=settings.alert_history_retention_days)
        )
        logger.info("Alert history using process memory")

    _alert_history = AlertHistory(backend, settings=settings)
    _alert_history_redis = redis
    return _alert_history


def reset_alert_history() -> None:
    """Reset alert history state for testing purposes."""
    global _alert_history, _alert_history_redis
    _alert_history = None
    _alert_history_redis = None
