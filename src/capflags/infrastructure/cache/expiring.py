"""In-process expiring cache implementation."""

import logging
import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from cachetools import TLRUCache  # type: ignore[import-untyped]

from capflags.core.entities.cache_entry import CacheEntry
from capflags.core.entities.config import DEFAULT_CACHE_TTL

logger = logging.getLogger(__name__)


def _entry_expiry(_key: str, entry: CacheEntry, _now: float) -> float:
    return entry.expires_at


class ExpiringCache:
    """Per-entry TTL cache shared by all resolvers.

    Built on cachetools ``TLRUCache`` so every entry carries its own
    expiry. Expired entries are treated as absent and evicted lazily on
    the next read. All access goes through a lock, so the cache is safe
    to share between threads as well as coroutines.
    """

    def __init__(
        self,
        maxsize: int = 1024,
        default_ttl: timedelta = DEFAULT_CACHE_TTL,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            maxsize: Maximum number of entries before LRU eviction.
            default_ttl: TTL applied when ``set`` is called without one.
            timer: Clock returning seconds; monotonic by default.
        """
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._store: TLRUCache[str, CacheEntry] = TLRUCache(
            maxsize=maxsize,
            ttu=_entry_expiry,
            timer=timer,
        )
        self._lock = threading.RLock()

    def get(self, key: str) -> Any | None:
        """Retrieve a cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value, or None if not found or expired.
        """
        with self._lock:
            self._store.expire()
            entry = self._store.get(key)
        if entry is None:
            logger.debug("Cache miss for %s", key)
            return None
        logger.debug("Cache hit for %s", key)
        return entry.value

    def get_entry(self, key: str) -> CacheEntry | None:
        """Return the live CacheEntry for ``key`` without evicting anything."""
        with self._lock:
            if key not in self._store:
                return None
            return self._store.get(key)

    def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Store value, replacing any previous entry for the key.

        Args:
            key: The cache key.
            value: The value to store.
            ttl: Optional time-to-live. If None, uses the default.
        """
        effective_ttl = ttl if ttl is not None else self._default_ttl
        with self._lock:
            entry = CacheEntry.create(
                key=key,
                value=value,
                ttl=effective_ttl,
                now=self._store.timer(),
            )
            self._store[key] = entry

    def delete(self, key: str) -> bool:
        """Delete a cached value.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cached values. Safe to call repeatedly."""
        with self._lock:
            self._store.clear()

    def stats(self) -> dict[str, Any]:
        """Return size and keys of live entries.

        Expired entries still held internally are excluded but not
        evicted, so calling this never changes the cache.
        """
        with self._lock:
            keys = [key for key in list(self._store.keys()) if key in self._store]
        return {"size": len(keys), "keys": keys}

    def __len__(self) -> int:
        """Return the number of live entries."""
        return self.stats()["size"]

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize

    @property
    def default_ttl(self) -> timedelta:
        """Return the TTL used when none is given."""
        return self._default_ttl
