"""Reachability probe interface."""

from typing import Protocol

from capflags.core.entities.capability import HealthCheckResult


class IReachabilityProbe(Protocol):
    """Something that can tell whether a backing store is reachable."""

    async def check(self) -> HealthCheckResult:
        """Probe the backing store.

        Returns:
            The probe outcome. Implementations report failures in the
            result instead of raising.
        """
        ...
