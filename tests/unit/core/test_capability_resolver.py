"""Tests for CapabilityResolver."""

import asyncio
import time

import pytest

from capflags.core.entities.capability import HealthStatus
from capflags.core.entities.config import ResolverConfig
from capflags.core.entities.resolution import Environment, ResolutionSource
from capflags.core.exceptions import (
    InvalidEnvironmentError,
    InvalidKeyError,
    SourceUnavailableError,
)
from capflags.core.services.capability_resolver import CapabilityResolver
from capflags.core.services.health import HealthTracker
from capflags.infrastructure.cache.expiring import ExpiringCache
from capflags.infrastructure.sources.overrides import EnvironmentOverrideSource
from tests.fakes import FakeClock, FakeParameterStore

MESSAGING_PATH = "/stackpro/sandbox/capabilities/messaging/base-url"


class TestSourceOrder:
    """Cache, environment override, parameter store, fallback."""

    async def test_environment_override(
        self,
        capability_resolver: CapabilityResolver,
        environ: dict[str, str],
        parameter_store: FakeParameterStore,
    ) -> None:
        environ["CAP_MESSAGING_BASE_URL"] = "https://msg.example.com"

        result = await capability_resolver.resolve_capability("messaging", "sandbox")

        assert result.value == "https://msg.example.com"
        assert result.source is ResolutionSource.GLOBAL
        assert result.degraded is False
        assert parameter_store.calls == []

    async def test_parameter_store(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
    ) -> None:
        parameter_store.values[MESSAGING_PATH] = "https://ssm.example.com"

        result = await capability_resolver.resolve_capability("messaging", "sandbox")

        assert result.value == "https://ssm.example.com"
        assert result.source is ResolutionSource.REMOTE
        assert parameter_store.calls == [MESSAGING_PATH]

    async def test_parameter_store_uses_default_environment(
        self,
        cache: ExpiringCache,
        parameter_store: FakeParameterStore,
        environ: dict[str, str],
    ) -> None:
        resolver = CapabilityResolver(
            cache=cache,
            parameter_store=parameter_store,
            overrides=EnvironmentOverrideSource(environ),
            config=ResolverConfig(default_environment=Environment.PRODUCTION),
        )

        await resolver.resolve_capability("ai")

        assert parameter_store.calls == ["/stackpro/production/capabilities/ai/base-url"]
        assert resolver.parameter_store_name == "fake-ssm"

    async def test_static_fallback(self, capability_resolver: CapabilityResolver) -> None:
        result = await capability_resolver.resolve_capability("messaging", "sandbox")

        assert result.value == "/api"
        assert result.source is ResolutionSource.DEFAULT
        assert result.degraded is False

    async def test_empty_override_is_ignored(
        self,
        capability_resolver: CapabilityResolver,
        environ: dict[str, str],
        parameter_store: FakeParameterStore,
    ) -> None:
        environ["CAP_MESSAGING_BASE_URL"] = ""
        parameter_store.values[MESSAGING_PATH] = "https://ssm.example.com"

        result = await capability_resolver.resolve_capability("messaging", "sandbox")

        assert result.source is ResolutionSource.REMOTE

    async def test_hyphenated_capability_override_name(
        self, capability_resolver: CapabilityResolver, environ: dict[str, str]
    ) -> None:
        environ["CAP_DATA_LAKE_BASE_URL"] = "https://lake.example.com"

        assert await capability_resolver.resolve_url("data-lake", "sandbox") == (
            "https://lake.example.com"
        )

    async def test_production_path(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
    ) -> None:
        await capability_resolver.resolve_url("datalake", Environment.PRODUCTION)

        assert parameter_store.calls == ["/stackpro/production/capabilities/datalake/base-url"]

    async def test_default_environment_from_config(
        self, cache: ExpiringCache, parameter_store: FakeParameterStore
    ) -> None:
        resolver = CapabilityResolver(
            cache=cache,
            parameter_store=parameter_store,
            overrides=EnvironmentOverrideSource({}),
            config=ResolverConfig(product="acme", default_environment=Environment.PRODUCTION),
        )

        await resolver.resolve_url("ai")

        assert parameter_store.calls == ["/acme/production/capabilities/ai/base-url"]


class TestDegradedMode:
    """The remote store can fail without failing the caller."""

    async def test_remote_failure_returns_fallback(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
    ) -> None:
        parameter_store.error = SourceUnavailableError("ssm", "AccessDeniedException")

        url = await capability_resolver.resolve_url("messaging", "sandbox")

        assert url == "/api"
        assert capability_resolver.last_result is not None
        assert capability_resolver.last_result.degraded is True
        assert capability_resolver.last_result.source is ResolutionSource.DEFAULT

    async def test_remote_timeout_returns_fallback(
        self, cache: ExpiringCache, environ: dict[str, str]
    ) -> None:
        store = FakeParameterStore(values={MESSAGING_PATH: "https://late"}, delay=5)
        resolver = CapabilityResolver(
            cache=cache,
            parameter_store=store,
            overrides=EnvironmentOverrideSource(environ),
            config=ResolverConfig(remote_timeout=0.05),
        )

        started = time.monotonic()
        result = await resolver.resolve_capability("messaging", "sandbox")

        assert time.monotonic() - started < 1
        assert result.value == "/api"
        assert result.degraded is True

    async def test_missing_parameter_is_not_degraded(
        self, capability_resolver: CapabilityResolver
    ) -> None:
        result = await capability_resolver.resolve_capability("billing", "sandbox")

        assert result.degraded is False

    async def test_repeated_failures_mark_error(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
        health: HealthTracker,
    ) -> None:
        parameter_store.error = SourceUnavailableError("ssm", "throttled")

        for capability in ("messaging", "datalake", "ai"):
            await capability_resolver.resolve_url(capability, "sandbox")

        assert health.health("fake-ssm") is HealthStatus.ERROR
        assert health.status().degraded is True

        parameter_store.error = None
        await capability_resolver.resolve_url("billing", "sandbox")

        assert health.health("fake-ssm") is HealthStatus.HEALTHY

    @pytest.mark.parametrize("capability", ["messaging", "datalake", "ai", "billing"])
    @pytest.mark.parametrize("environment", ["sandbox", "production"])
    async def test_always_returns_usable_url(
        self,
        cache: ExpiringCache,
        capability: str,
        environment: str,
    ) -> None:
        resolver = CapabilityResolver(
            cache=cache,
            parameter_store=FakeParameterStore(error=ConnectionError("unreachable")),
            overrides=EnvironmentOverrideSource({}),
            config=ResolverConfig(remote_timeout=0.1),
        )

        url = await resolver.resolve_url(capability, environment)

        assert isinstance(url, str)
        assert url


class TestCaching:
    """Cache behavior of capability URLs."""

    async def test_second_call_skips_remote(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
    ) -> None:
        parameter_store.values[MESSAGING_PATH] = "https://ssm.example.com"

        first = await capability_resolver.resolve_url("messaging", "sandbox")
        second = await capability_resolver.resolve_url("messaging", "sandbox")

        assert first == second
        assert len(parameter_store.calls) == 1
        assert capability_resolver.last_result.source is ResolutionSource.CACHE

    async def test_environments_cached_separately(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
    ) -> None:
        await capability_resolver.resolve_url("messaging", "sandbox")
        await capability_resolver.resolve_url("messaging", "production")

        assert len(parameter_store.calls) == 2

    async def test_ttl_expiry_requeries_remote(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
        clock: FakeClock,
    ) -> None:
        await capability_resolver.resolve_url("messaging", "sandbox")
        clock.advance(61)
        await capability_resolver.resolve_url("messaging", "sandbox")

        assert len(parameter_store.calls) == 2

    async def test_clear_cache_forces_full_walk(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
        cache: ExpiringCache,
    ) -> None:
        await capability_resolver.resolve_url("messaging", "sandbox")
        assert cache.stats()["size"] == 1

        cache.clear()
        assert cache.stats()["size"] == 0

        await capability_resolver.resolve_url("messaging", "sandbox")
        assert len(parameter_store.calls) == 2

    async def test_concurrent_misses_converge(
        self,
        capability_resolver: CapabilityResolver,
        parameter_store: FakeParameterStore,
    ) -> None:
        parameter_store.values[MESSAGING_PATH] = "https://ssm.example.com"
        parameter_store.delay = 0.01

        urls = await asyncio.gather(
            *(capability_resolver.resolve_url("messaging", "sandbox") for _ in range(5))
        )

        assert set(urls) == {"https://ssm.example.com"}
        assert 1 <= len(parameter_store.calls) <= 5
        assert await capability_resolver.resolve_url("messaging", "sandbox") == urls[0]


class TestValidation:
    """Invalid arguments are caller errors."""

    async def test_unknown_environment(self, capability_resolver: CapabilityResolver) -> None:
        with pytest.raises(InvalidEnvironmentError):
            await capability_resolver.resolve_url("messaging", "staging")

    @pytest.mark.parametrize("capability", ["", "../etc", "a/b", "with space"])
    async def test_malformed_capability(
        self, capability_resolver: CapabilityResolver, capability: str
    ) -> None:
        with pytest.raises(InvalidKeyError):
            await capability_resolver.resolve_url(capability, "sandbox")
