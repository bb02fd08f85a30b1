"""Health and degraded-state tracking."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from capflags.core.entities.capability import HealthCheckResult, HealthStatus
from capflags.core.interfaces.probe import IReachabilityProbe

logger = logging.getLogger(__name__)


@dataclass
class _SourceState:
    consecutive_failures: int = 0
    last_error: str | None = None
    last_check: datetime | None = None


class HealthTracker:
    """Tracks whether remote sources are answering.

    Resolvers report every remote lookup outcome here. A source is
    degraded after any failure and in error once it has failed
    ``error_threshold`` times in a row; one success clears it.
    """

    def __init__(self, error_threshold: int = 3) -> None:
        self._error_threshold = error_threshold
        self._sources: dict[str, _SourceState] = {}

    def record_success(self, source: str) -> None:
        state = self._sources.setdefault(source, _SourceState())
        if state.consecutive_failures:
            logger.info("%s recovered after %d failures", source, state.consecutive_failures)
        state.consecutive_failures = 0
        state.last_error = None
        state.last_check = datetime.now(timezone.utc)

    def record_failure(self, source: str, reason: str) -> None:
        state = self._sources.setdefault(source, _SourceState())
        state.consecutive_failures += 1
        state.last_error = reason
        state.last_check = datetime.now(timezone.utc)

    def health(self, source: str | None = None) -> HealthStatus:
        """Return the health of one source, or the worst across all sources."""
        states = self._states(source)
        if not states:
            return HealthStatus.UNKNOWN
        worst = max(state.consecutive_failures for state in states)
        if worst >= self._error_threshold:
            return HealthStatus.ERROR
        if worst > 0:
            return HealthStatus.DEGRADED
        return HealthStatus.HEALTHY

    def status(self, source: str | None = None) -> HealthCheckResult:
        """Summarize tracked state as a HealthCheckResult.

        Sources that were never consulted count as healthy.
        """
        states = self._states(source)
        failing = [state for state in states if state.consecutive_failures]
        checks = [state.last_check for state in states if state.last_check]
        last_check = max(checks) if checks else None

        if not failing:
            return HealthCheckResult(healthy=True, degraded=False, last_check=last_check)
        return HealthCheckResult(
            healthy=False,
            degraded=True,
            reason="; ".join(state.last_error or "unknown error" for state in failing),
            last_check=last_check,
        )

    def reset(self) -> None:
        self._sources.clear()

    def _states(self, source: str | None) -> list[_SourceState]:
        if source is None:
            return list(self._sources.values())
        state = self._sources.get(source)
        return [state] if state is not None else []


class FlagHealthChecker:
    """Reports whether the flag override backing store is reachable.

    Delegates to a pluggable probe. With the environment as backing store
    the probe is static and the answer is always healthy.
    """

    def __init__(self, probe: IReachabilityProbe) -> None:
        self._probe = probe

    async def check(self) -> HealthCheckResult:
        """Run the probe; probe errors are reported as a degraded result."""
        try:
            return await self._probe.check()
        except Exception as e:
            logger.warning("Flag health probe failed: %s", e)
            return HealthCheckResult.failed(str(e) or type(e).__name__)
