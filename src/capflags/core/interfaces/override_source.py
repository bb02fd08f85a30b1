"""Override source interface."""

from collections.abc import Awaitable
from typing import Protocol


class IOverrideSource(Protocol):
    """Flat mapping of naming-convention keys to raw string overrides.

    Implementations may answer synchronously (process environment) or
    return an awaitable (remote tables). The core only reads.
    """

    name: str

    def get(self, key: str) -> str | None | Awaitable[str | None]:
        """Return the raw override for ``key``, or None if unset."""
        ...

    def keys(self) -> list[str]:
        """Return the override keys currently known to this source."""
        ...
