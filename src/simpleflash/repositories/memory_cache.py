"""In-process implementation of ResponseCache.

Entries live in an insertion-ordered map guarded by a lock, so the
oldest entry is always at the front. Expired entries are dropped lazily
on lookup and from the front whenever a write triggers eviction.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

from simpleflash.config import settings
from simpleflash.entities import CacheEntryEntity
from simpleflash.errors import CacheUnavailable

logger = logging.getLogger(__name__)


class MemoryResponseCache:
    """Bounded time-to-live cache held in process memory.

    This class satisfies the ResponseCache protocol through structural
    typing - no explicit inheritance needed.

    Behaviour:
    - Entries older than ``ttl`` seconds are treated as absent
    - Total stored bytes (key + value) never exceed ``max_size_bytes``;
      the oldest entries are evicted first
    - Writing an existing key replaces it and refreshes its age
    - Safe to share across threads and asyncio tasks
    """

    def __init__(
        self,
        ttl: float | None = None,
        max_size_bytes: int | None = None,
        verbose: bool = False,
        stats_enabled: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the memory cache.

        Args:
            ttl: Retention window in seconds. Defaults to settings.
            max_size_bytes: Hard ceiling on stored bytes. Defaults to settings.
            verbose: Log evictions at debug level.
            stats_enabled: Count hits and misses.
            clock: Monotonic time source, injectable for tests.

        Raises:
            CacheUnavailable: If the retention window or ceiling is not positive
        """
        self._ttl = settings.cache_ttl if ttl is None else ttl
        self._max_size_bytes = settings.cache_max_size_bytes if max_size_bytes is None else max_size_bytes
        if self._ttl <= 0:
            raise CacheUnavailable(f"Cache TTL must be positive, got {self._ttl}")
        if self._max_size_bytes <= 0:
            raise CacheUnavailable(f"Cache size ceiling must be positive, got {self._max_size_bytes}")

        self._verbose = verbose
        self._stats_enabled = stats_enabled
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntryEntity] = OrderedDict()
        self._size = 0
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> bytes | None:
        """Look up a cached response.

        Args:
            key: The derived cache key

        Returns:
            The stored bytes, or None if absent or expired
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(self._clock(), self._ttl):
                self._remove(key)
                entry = None

            if self._stats_enabled:
                if entry is None:
                    self._misses += 1
                else:
                    self._hits += 1

            return entry.value if entry is not None else None

    def set(self, key: str, value: bytes) -> None:
        """Store a response, evicting the oldest entries if over the ceiling.

        An entry larger than the whole ceiling is skipped.

        Args:
            key: The derived cache key
            value: The response text as bytes
        """
        with self._lock:
            now = self._clock()
            entry = CacheEntryEntity(key=key, value=bytes(value), inserted_at=now)
            if entry.size > self._max_size_bytes:
                logger.warning(
                    "Skipping cache entry %s: %d bytes exceeds ceiling of %d",
                    key,
                    entry.size,
                    self._max_size_bytes,
                )
                return

            if key in self._entries:
                self._remove(key)
            self._entries[key] = entry
            self._size += entry.size
            self._evict(now)

    def delete(self, key: str) -> bool:
        """Remove a single entry.

        Args:
            key: The derived cache key

        Returns:
            True if an entry was removed, False otherwise
        """
        with self._lock:
            if key not in self._entries:
                return False
            self._remove(key)
            return True

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._size = 0
            return count

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with stats
        """
        with self._lock:
            stats = {
                "backend": "memory",
                "total_entries": len(self._entries),
                "size_bytes": self._size,
                "max_size_bytes": self._max_size_bytes,
                "ttl": self._ttl,
                "evictions": self._evictions,
            }
            if self._stats_enabled:
                total = self._hits + self._misses
                stats["hits"] = self._hits
                stats["misses"] = self._misses
                stats["hit_rate"] = self._hits / total if total > 0 else 0.0
            return stats

    def close(self) -> None:
        """Drop all entries."""
        self.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _remove(self, key: str) -> None:
        # Caller holds the lock
        entry = self._entries.pop(key)
        self._size -= entry.size

    def _evict(self, now: float) -> None:
        # Caller holds the lock; entries are in insertion order, oldest first
        while self._entries:
            oldest_key, oldest = next(iter(self._entries.items()))
            if not oldest.is_expired(now, self._ttl) and self._size <= self._max_size_bytes:
                break
            self._remove(oldest_key)
            self._evictions += 1
            if self._verbose:
                logger.debug("Evicted cache entry %s (%d bytes)", oldest_key, oldest.size)
