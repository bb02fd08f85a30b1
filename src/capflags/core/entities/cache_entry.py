"""Cache entry entity."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry value object.

    ``expires_at`` is expressed on the owning cache's clock (monotonic
    seconds by default), not wall-clock time.
    """

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check if entry has expired at ``now``.

        Returns:
            True once ``now`` has reached ``expires_at``.
        """
        return not now < self.expires_at

    @classmethod
    def create(
        cls,
        key: str,
        value: Any,
        ttl: timedelta,
        now: float,
    ) -> "CacheEntry":
        """Factory method to create a new cache entry.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Time-to-live from ``now``.
            now: Current time on the cache clock.

        Returns:
            A new CacheEntry instance.
        """
        return cls(key=key, value=value, expires_at=now + ttl.total_seconds())
