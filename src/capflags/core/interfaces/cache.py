"""Expiring cache interface."""

from datetime import timedelta
from typing import Any, Protocol


class IExpiringCache(Protocol):
    """Contract for the process-local resolution cache.

    Operations are synchronous and never fail. A present, non-expired
    entry is authoritative for its key.
    """

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired."""
        ...

    def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Insert or overwrite a value.

        Args:
            key: The cache key.
            value: The value to store.
            ttl: Optional time-to-live. If None, uses the cache default.
        """
        ...

    def clear(self) -> None:
        """Remove all entries."""
        ...

    def stats(self) -> dict[str, Any]:
        """Return ``{"size": int, "keys": list[str]}`` without mutating state."""
        ...
