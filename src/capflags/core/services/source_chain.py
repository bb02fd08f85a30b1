"""Source chain resolver - shared walk over ordered value sources."""

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from capflags.core.entities.config import DEFAULT_CACHE_TTL
from capflags.core.entities.resolution import (
    ResolutionRequest,
    ResolutionResult,
    ResolutionSource,
)
from capflags.core.entities.resolution_key import ResolutionKey
from capflags.core.interfaces.cache import IExpiringCache
from capflags.core.services.health import HealthTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValueSource:
    """One tier of a source chain.

    Attributes:
        name: Label used in logs and health tracking.
        tier: Provenance reported when this source answers.
        lookup: Returns the value, None for absent, or an awaitable of either.
        remote: Whether outcomes are reported to the health tracker.
    """

    name: str
    tier: ResolutionSource
    lookup: Callable[[ResolutionRequest], Any]
    remote: bool = False


class SourceChainResolver:
    """Walks a fixed, ordered list of sources and caches the answer.

    The expiring cache is consulted first; on a miss each source is
    tried in order and the first definitive value wins. A source that
    raises or times out counts as absent and marks the result degraded.
    The walk ends at :meth:`default`, which always answers.

    Cache hits do not extend the entry's TTL: a value is served from
    cache for at most one TTL after the walk that produced it.

    Subclasses provide :meth:`sources` and :meth:`default`.
    """

    def __init__(
        self,
        cache: IExpiringCache,
        ttl: timedelta = DEFAULT_CACHE_TTL,
        timeout: float = 2.0,
        health: HealthTracker | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            cache: Shared expiring cache.
            ttl: TTL of entries written after a walk.
            timeout: Upper bound in seconds for any awaitable lookup.
            health: Optional tracker receiving remote source outcomes.
        """
        self._cache = cache
        self._ttl = ttl
        self._timeout = timeout
        self._health = health
        self.last_result: ResolutionResult | None = None

    @property
    def cache(self) -> IExpiringCache:
        return self._cache

    def sources(self, request: ResolutionRequest) -> list[ValueSource]:
        """Return the ordered sources to consult for ``request``."""
        raise NotImplementedError

    def default(self, request: ResolutionRequest) -> Any:
        """Return the terminal fallback value for ``request``."""
        raise NotImplementedError

    def accept(self, value: Any) -> bool:
        """Whether a looked-up value is definitive."""
        return value is not None

    async def resolve(self, request: ResolutionRequest) -> ResolutionResult:
        """Resolve a request through the cache and the source chain.

        Args:
            request: What to resolve.

        Returns:
            The resolved value with its provenance. Never raises for a
            source failure.
        """
        key = str(ResolutionKey.from_request(request))

        cached = self._cache.get(key)
        if cached is not None:
            result = cached.from_cache()
        else:
            result = await self._walk(request)
            self._cache.set(key, result, self._ttl)

        self.last_result = result
        return result

    async def _walk(self, request: ResolutionRequest) -> ResolutionResult:
        degraded = False

        for source in self.sources(request):
            try:
                value = await self._lookup(source, request)
            except asyncio.TimeoutError:
                degraded = True
                self._record_failure(source, request, f"timed out after {self._timeout}s")
                continue
            except Exception as e:
                degraded = True
                self._record_failure(source, request, str(e) or type(e).__name__)
                continue

            if source.remote and self._health is not None:
                self._health.record_success(source.name)

            if self.accept(value):
                logger.debug("Resolved %s from %s", request.subject, source.name)
                return ResolutionResult(value=value, source=source.tier, degraded=degraded)

        return ResolutionResult(
            value=self.default(request),
            source=ResolutionSource.DEFAULT,
            degraded=degraded,
        )

    async def _lookup(self, source: ValueSource, request: ResolutionRequest) -> Any:
        value = source.lookup(request)
        if inspect.isawaitable(value):
            value = await asyncio.wait_for(value, self._timeout)
        return value

    def _record_failure(
        self, source: ValueSource, request: ResolutionRequest, reason: str
    ) -> None:
        logger.warning(
            "%s lookup failed for %s/%s: %s",
            source.name,
            request.kind.value,
            request.subject,
            reason,
        )
        if source.remote and self._health is not None:
            self._health.record_failure(source.name, reason)
