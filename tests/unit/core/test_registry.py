"""Tests for CapabilityRegistryBuilder."""

import pytest

from capflags.core.entities.capability import HealthStatus, validate_capability
from capflags.core.exceptions import SourceUnavailableError
from capflags.core.services.capability_resolver import CapabilityResolver
from capflags.core.services.flag_resolver import TenantFlagResolver
from capflags.core.services.health import HealthTracker
from capflags.core.services.registry import CapabilityRegistryBuilder, RegistryEntry
from tests.fakes import FakeParameterStore


@pytest.fixture
def builder(
    capability_resolver: CapabilityResolver,
    flag_resolver: TenantFlagResolver,
    health: HealthTracker,
) -> CapabilityRegistryBuilder:
    return CapabilityRegistryBuilder(
        capabilities=capability_resolver,
        flags=flag_resolver,
        health=health,
    )


class TestCapabilityRegistryBuilder:
    """Tests for registry assembly."""

    async def test_disabled_capabilities_have_no_url(
        self, builder: CapabilityRegistryBuilder, parameter_store: FakeParameterStore
    ) -> None:
        registry = await builder.build("sandbox")

        assert [c.id for c in registry.capabilities] == ["messaging", "data-lake"]
        assert all(c.enabled is False for c in registry.capabilities)
        assert all(c.base_url is None for c in registry.capabilities)
        assert parameter_store.calls == []

    async def test_enabled_for_tenant(
        self,
        builder: CapabilityRegistryBuilder,
        environ: dict[str, str],
        parameter_store: FakeParameterStore,
    ) -> None:
        environ["CAP_MESSAGING_ENABLED:tenant:t1"] = "true"
        parameter_store.values["/stackpro/sandbox/capabilities/messaging/base-url"] = (
            "https://msg.example.com"
        )

        registry = await builder.build("sandbox", tenant_id="t1", request_id="req_1")
        messaging, datalake = registry.capabilities

        assert messaging.enabled is True
        assert messaging.base_url == "https://msg.example.com"
        assert messaging.health is HealthStatus.HEALTHY
        assert messaging.scopes == ["read", "write"]
        assert datalake.enabled is False
        assert registry.request_id == "req_1"
        assert registry.degraded is False

    async def test_datalake_uses_capability_name(
        self,
        builder: CapabilityRegistryBuilder,
        environ: dict[str, str],
        parameter_store: FakeParameterStore,
    ) -> None:
        environ["CAP_DATALAKE_ENABLED"] = "true"

        registry = await builder.build("production")

        assert parameter_store.calls == ["/stackpro/production/capabilities/datalake/base-url"]
        assert registry.capabilities[1].base_url == "/api"
        assert registry.capabilities[1].health is HealthStatus.UNKNOWN

    async def test_degraded_remote(
        self,
        builder: CapabilityRegistryBuilder,
        environ: dict[str, str],
        parameter_store: FakeParameterStore,
    ) -> None:
        environ["CAP_MESSAGING_ENABLED"] = "true"
        parameter_store.error = SourceUnavailableError("ssm", "down")

        registry = await builder.build("sandbox")
        messaging = registry.capabilities[0]

        assert messaging.degraded is True
        assert messaging.base_url == "/api"
        assert messaging.health is HealthStatus.DEGRADED
        assert registry.degraded is True
        assert registry.to_dict()["metadata"]["degraded"] is True

    async def test_error_health_after_repeated_failures(
        self,
        builder: CapabilityRegistryBuilder,
        environ: dict[str, str],
        parameter_store: FakeParameterStore,
        health: HealthTracker,
    ) -> None:
        environ["CAP_MESSAGING_ENABLED"] = "true"
        parameter_store.error = SourceUnavailableError("ssm", "down")
        for _ in range(3):
            health.record_failure("fake-ssm", "down")

        registry = await builder.build("sandbox")

        assert registry.capabilities[0].health is HealthStatus.ERROR
        assert registry.capabilities[0].degraded is True

    async def test_contract_and_wire_format(
        self, builder: CapabilityRegistryBuilder, environ: dict[str, str]
    ) -> None:
        environ["CAP_MESSAGING_ENABLED"] = "true"
        environ["CAP_MESSAGING_BASE_URL"] = "https://msg.example.com"

        registry = await builder.build(
            "sandbox", contract_base="https://api.example.com/"
        )
        data = registry.to_dict()

        assert data["env"] == "sandbox"
        assert len(data["version"]) == len("2026-10-17")
        messaging = data["capabilities"][0]
        assert messaging["contract"] == "https://api.example.com/contracts/messaging/v1.yaml"
        assert messaging["sdk"]["npm"] == "@stackpro/messaging-client"
        assert messaging["baseUrl"] == "https://msg.example.com"
        assert all(validate_capability(c) for c in data["capabilities"])

    async def test_custom_entries(
        self,
        capability_resolver: CapabilityResolver,
        flag_resolver: TenantFlagResolver,
        environ: dict[str, str],
    ) -> None:
        environ["CAP_AI_ENABLED"] = "true"
        environ["CAP_AI_BASE_URL"] = "https://ai.example.com"
        builder = CapabilityRegistryBuilder(
            capabilities=capability_resolver,
            flags=flag_resolver,
            entries=[RegistryEntry(id="ai", flag_key="CAP_AI_ENABLED")],
        )

        registry = await builder.build()

        assert registry.env == "sandbox"
        assert [c.base_url for c in registry.capabilities] == ["https://ai.example.com"]
        assert registry.capabilities[0].contract is None

    async def test_flag_store_errors_do_not_mark_url_error(
        self,
        builder: CapabilityRegistryBuilder,
        environ: dict[str, str],
        parameter_store: FakeParameterStore,
        health: HealthTracker,
    ) -> None:
        environ["CAP_MESSAGING_ENABLED"] = "true"
        parameter_store.error = SourceUnavailableError("ssm", "down")
        for _ in range(3):
            health.record_failure("dynamodb:global", "table missing")

        registry = await builder.build("sandbox")

        assert registry.capabilities[0].health is HealthStatus.DEGRADED
