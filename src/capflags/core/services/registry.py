"""Capability registry builder for discovery endpoints."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from capflags.core.entities.capability import (
    CapabilityDefinition,
    CapabilityRegistry,
    HealthStatus,
    SdkInfo,
    create_capability_definition,
)
from capflags.core.entities.resolution import Environment, ResolutionSource
from capflags.core.services.capability_resolver import CapabilityResolver
from capflags.core.services.flag_resolver import TenantFlagResolver
from capflags.core.services.health import HealthTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    """Static description of one capability exposed by the registry.

    ``id`` is the public identifier; ``capability`` is the name used for
    base URL resolution when it differs.
    """

    id: str
    flag_key: str
    capability: str | None = None
    version: str = "1.0.0"
    scopes: tuple[str, ...] = ("read",)
    sdk: SdkInfo | None = None
    contract_path: str | None = None
    description: str | None = None

    @property
    def url_capability(self) -> str:
        return self.capability or self.id


DEFAULT_REGISTRY_ENTRIES: tuple[RegistryEntry, ...] = (
    RegistryEntry(
        id="messaging",
        flag_key="CAP_MESSAGING_ENABLED",
        scopes=("read", "write"),
        sdk=SdkInfo(npm="@stackpro/messaging-client", version="0.1.0"),
        contract_path="/contracts/messaging/v1.yaml",
        description="Multi-tenant messaging and collaboration system",
    ),
    RegistryEntry(
        id="data-lake",
        capability="datalake",
        flag_key="CAP_DATALAKE_ENABLED",
        scopes=("ingest", "query"),
        sdk=SdkInfo(npm="@stackpro/datalake-client", version="0.1.0"),
        contract_path="/contracts/datalake/v1.yaml",
        description="Tenant data ingestion and analytics platform",
    ),
)


@dataclass
class CapabilityRegistryBuilder:
    """Assembles a CapabilityRegistry from flags and resolved URLs.

    A capability's base URL is only resolved when its flag is enabled
    for the tenant; disabled capabilities always report a null URL.
    """

    capabilities: CapabilityResolver
    flags: TenantFlagResolver
    health: HealthTracker | None = None
    entries: Sequence[RegistryEntry] = DEFAULT_REGISTRY_ENTRIES

    async def build(
        self,
        environment: Environment | str | None = None,
        tenant_id: str | None = None,
        request_id: str | None = None,
        contract_base: str | None = None,
    ) -> CapabilityRegistry:
        """Build the registry for an environment and tenant.

        Args:
            environment: Deployment environment. Defaults to the
                capability resolver's configured environment.
            tenant_id: Tenant whose flags decide which capabilities are on.
            request_id: Optional id echoed in the registry metadata.
            contract_base: Optional URL prefix for contract documents.

        Returns:
            The assembled registry.
        """
        env = Environment.parse(
            environment
            if environment is not None
            else self.capabilities.config.default_environment
        )
        now = datetime.now(timezone.utc)

        definitions = [
            await self._definition(entry, env, tenant_id, contract_base)
            for entry in self.entries
        ]

        registry = CapabilityRegistry(
            env=env.value,
            version=now.date().isoformat(),
            capabilities=definitions,
            request_id=request_id,
            timestamp=now,
        )
        logger.debug(
            "Built capability registry for %s (tenant=%s, degraded=%s)",
            env.value,
            tenant_id,
            registry.degraded,
        )
        return registry

    async def _definition(
        self,
        entry: RegistryEntry,
        env: Environment,
        tenant_id: str | None,
        contract_base: str | None,
    ) -> CapabilityDefinition:
        enabled = await self.flags.is_enabled(entry.flag_key, tenant_id=tenant_id)

        base_url = None
        degraded = False
        health = HealthStatus.UNKNOWN
        if enabled:
            result = await self.capabilities.resolve_capability(entry.url_capability, env)
            base_url = result.value
            degraded = result.degraded
            if degraded:
                health = HealthStatus.DEGRADED
                if (
                    self.health is not None
                    and self.health.health(self.capabilities.parameter_store_name)
                    is HealthStatus.ERROR
                ):
                    health = HealthStatus.ERROR
            elif result.source is ResolutionSource.REMOTE:
                health = HealthStatus.HEALTHY

        contract = None
        if entry.contract_path:
            contract = f"{(contract_base or '').rstrip('/')}{entry.contract_path}"

        return create_capability_definition(
            entry.id,
            version=entry.version,
            enabled=enabled,
            degraded=degraded,
            base_url=base_url,
            scopes=list(entry.scopes),
            health=health,
            sdk=entry.sdk,
            contract=contract,
            description=entry.description,
        )
