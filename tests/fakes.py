"""Test doubles shared across the capflags test suite."""

import asyncio

from capflags.core.entities.capability import HealthCheckResult


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeParameterStore:
    """In-memory parameter store that records every lookup."""

    name = "fake-ssm"

    def __init__(
        self,
        values: dict[str, str] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.values = dict(values or {})
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    async def get_parameter(self, name: str) -> str | None:
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.values.get(name)


class FakeRemoteOverrides:
    """Async override store that can be switched into failure."""

    name = "fake-table"

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values = dict(values or {})
        self.error: Exception | None = None
        self.calls: list[str] = []

    async def get(self, key: str) -> str | None:
        self.calls.append(key)
        if self.error is not None:
            raise self.error
        return self.values.get(key)

    def keys(self) -> list[str]:
        return list(self.values)


class FakeProbe:
    """Probe returning a fixed result, or raising."""

    def __init__(
        self,
        result: HealthCheckResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.result = result or HealthCheckResult.ok()
        self.error = error

    async def check(self) -> HealthCheckResult:
        if self.error is not None:
            raise self.error
        return self.result
