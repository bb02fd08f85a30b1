"""Reachability probe implementations."""

from capflags.core.entities.capability import HealthCheckResult


class StaticReachabilityProbe:
    """Probe for override stores with nothing to reach.

    Always reports healthy. Used when flag overrides come from the
    process environment, so its answer carries no real signal.
    """

    def __init__(self, reason: str | None = None) -> None:
        self._reason = reason

    async def check(self) -> HealthCheckResult:
        result = HealthCheckResult.ok()
        if self._reason is None:
            return result
        return HealthCheckResult(
            healthy=True,
            degraded=False,
            reason=self._reason,
            last_check=result.last_check,
        )
