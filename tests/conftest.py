"""Pytest configuration for capflags tests."""

import pytest

from capflags.core.entities.config import ResolverConfig
from capflags.core.services.capability_resolver import CapabilityResolver
from capflags.core.services.flag_resolver import TenantFlagResolver
from capflags.core.services.health import HealthTracker
from capflags.infrastructure.cache.expiring import ExpiringCache
from capflags.infrastructure.sources.overrides import EnvironmentOverrideSource
from tests.fakes import FakeClock, FakeParameterStore


@pytest.fixture(autouse=True)
def reset_runtime():
    """Restore the process-wide runtime after each test."""
    import capflags.runtime

    original = capflags.runtime._runtime

    yield

    capflags.runtime._runtime = original


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ExpiringCache:
    return ExpiringCache(maxsize=100, timer=clock)


@pytest.fixture
def environ() -> dict[str, str]:
    return {}


@pytest.fixture
def parameter_store() -> FakeParameterStore:
    return FakeParameterStore()


@pytest.fixture
def health() -> HealthTracker:
    return HealthTracker(error_threshold=3)


@pytest.fixture
def capability_resolver(
    cache: ExpiringCache,
    parameter_store: FakeParameterStore,
    environ: dict[str, str],
    health: HealthTracker,
) -> CapabilityResolver:
    return CapabilityResolver(
        cache=cache,
        parameter_store=parameter_store,
        overrides=EnvironmentOverrideSource(environ),
        config=ResolverConfig(remote_timeout=0.2),
        health=health,
    )


@pytest.fixture
def flag_resolver(cache: ExpiringCache, environ: dict[str, str]) -> TenantFlagResolver:
    return TenantFlagResolver(cache=cache, overrides=EnvironmentOverrideSource(environ))
