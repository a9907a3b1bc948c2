"""Resolution cache for Slack identifiers.

Maps ``(EntityKind, name)`` to the identifier Slack returned for it, for a
bounded time. An entry is served only while ``now - stored_at < ttl``; expired
entries are evicted when read and by ``purge_expired``, which an optional
background sweep runs periodically.
"""

import asyncio
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

logger = structlog.get_logger()


class EntityKind(Enum):
    """Kinds of Slack entities that can be resolved by name."""

    CHANNEL = "channel"
    USER = "user"


@dataclass(frozen=True)
class ResolutionCacheEntry:
    """A cached resolution.

    Attributes:
        identifier: Slack identifier (e.g. "C0123456789")
        stored_at: Clock reading when the entry was written
    """

    identifier: str
    stored_at: float

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.stored_at >= ttl_seconds


CacheKey = Tuple[EntityKind, str]


class ResolutionCache:
    """Thread-safe TTL cache of resolved identifiers.

    Args:
        ttl_seconds: Lifetime of an entry
        clock: Monotonic clock returning seconds, injectable for tests
    """

    def __init__(
        self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, ResolutionCacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._sweeper: Optional[asyncio.Task] = None

    def get(self, kind: EntityKind, name: str) -> Optional[str]:
        """Return the cached identifier, or None if absent or expired."""
        key = (kind, name)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.is_expired(self._clock(), self.ttl_seconds):
                del self._entries[key]
                self._evictions += 1
                self._misses += 1
                return None
            self._hits += 1
            return entry.identifier

    def set(self, kind: EntityKind, name: str, identifier: str) -> ResolutionCacheEntry:
        """Store ``identifier`` for ``(kind, name)``, stamped with the current time.

        Last writer wins.
        """
        entry = ResolutionCacheEntry(identifier=identifier, stored_at=self._clock())
        with self._lock:
            self._entries[(kind, name)] = entry
        return entry

    def purge_expired(self) -> int:
        """Evict every expired entry.

        Returns:
            Number of evicted entries
        """
        with self._lock:
            now = self._clock()
            expired = [
                key
                for key, entry in self._entries.items()
                if entry.is_expired(now, self.ttl_seconds)
            ]
            for key in expired:
                del self._entries[key]
            self._evictions += len(expired)
        if expired:
            logger.debug("resolution_cache_purged", evicted=len(expired))
        return len(expired)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "ttl_seconds": self.ttl_seconds,
                "sweeping": self._sweeper is not None and not self._sweeper.done(),
            }

    def start_sweeper(self, interval_seconds: float) -> asyncio.Task:
        """Start purging expired entries every ``interval_seconds``.

        Must be called from a running event loop. Stop it with ``close``.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if self._sweeper is not None and not self._sweeper.done():
            return self._sweeper

        async def sweep() -> None:
            while True:
                await asyncio.sleep(interval_seconds)
                self.purge_expired()

        self._sweeper = asyncio.get_running_loop().create_task(sweep())
        logger.info("resolution_cache_sweeper_started", interval_seconds=interval_seconds)
        return self._sweeper

    async def close(self) -> None:
        """Stop the background sweep, if running."""
        sweeper, self._sweeper = self._sweeper, None
        if sweeper is None or sweeper.done():
            return
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
        logger.info("resolution_cache_sweeper_stopped")
