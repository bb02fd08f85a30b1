"""Process-wide runtime and module-level resolution functions.

The resolvers are plain objects and can be wired by hand; this module
holds one shared instance for applications that just want to call
``resolve_capability_url`` and friends.

Example:
    from capflags import runtime

    url = await runtime.resolve_capability_url("messaging", "sandbox")
    flags = await runtime.resolve_tenant_flags(
        ["CAP_MESSAGING_ENABLED", "CAP_DATALAKE_ENABLED"],
        tenant_id="tenant-42",
    )
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from capflags.core.entities.capability import HealthCheckResult
from capflags.core.entities.config import ResolverConfig
from capflags.core.entities.resolution import Environment, ResolutionResult
from capflags.core.interfaces.override_source import IOverrideSource
from capflags.core.interfaces.parameter_store import IParameterStore
from capflags.core.interfaces.probe import IReachabilityProbe
from capflags.core.services.capability_resolver import CapabilityResolver
from capflags.core.services.flag_resolver import TenantFlagResolver
from capflags.core.services.health import FlagHealthChecker, HealthTracker
from capflags.core.services.registry import CapabilityRegistryBuilder
from capflags.infrastructure.cache.expiring import ExpiringCache
from capflags.infrastructure.probes import StaticReachabilityProbe
from capflags.infrastructure.sources.overrides import (
    DynamoDBOverrideSource,
    EnvironmentOverrideSource,
)
from capflags.infrastructure.sources.parameter_store import SSMParameterStore

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """One cache, one health tracker and the resolvers sharing them."""

    config: ResolverConfig
    cache: ExpiringCache
    health: HealthTracker
    capabilities: CapabilityResolver
    flags: TenantFlagResolver
    flag_health: FlagHealthChecker
    registry: CapabilityRegistryBuilder

    @classmethod
    def create(
        cls,
        config: ResolverConfig | None = None,
        environ: Mapping[str, str] | None = None,
        parameter_store: IParameterStore | None = None,
        flag_overrides: IOverrideSource | None = None,
        flag_probe: IReachabilityProbe | None = None,
        cache: ExpiringCache | None = None,
    ) -> "Runtime":
        """Wire a runtime from configuration.

        Args:
            config: Resolver configuration. Uses defaults if not provided.
            environ: Mapping used for environment overrides. Defaults to
                ``os.environ``.
            parameter_store: Remote store for capability URLs. Defaults to
                SSM in the configured region.
            flag_overrides: Backing store for flag overrides. Defaults to a
                DynamoDB table when ``config.flags_table`` is set, otherwise
                the environment. A store other than the environment is
                treated as remote and falls back to the environment.
            flag_probe: Probe for flag health. Defaults to the DynamoDB
                source when one is used, otherwise a static probe.
            cache: Cache to share. A new one is created if not provided.

        Returns:
            A new Runtime.
        """
        config = config or ResolverConfig()
        cache = cache or ExpiringCache(
            maxsize=config.cache_maxsize,
            default_ttl=config.cache_ttl,
        )
        health = HealthTracker(error_threshold=config.error_threshold)
        environment_source = EnvironmentOverrideSource(environ)

        if parameter_store is None:
            parameter_store = SSMParameterStore(
                region=config.region,
                timeout=config.remote_timeout,
            )

        flag_fallback = None
        if flag_overrides is None and config.flags_table:
            flag_overrides = DynamoDBOverrideSource(
                table_name=config.flags_table,
                region=config.region,
                timeout=config.remote_timeout,
            )
        if flag_overrides is None:
            flag_overrides = environment_source
        else:
            flag_fallback = environment_source

        if flag_probe is None:
            if isinstance(flag_overrides, DynamoDBOverrideSource):
                flag_probe = flag_overrides
            else:
                flag_probe = StaticReachabilityProbe()

        capabilities = CapabilityResolver(
            cache=cache,
            parameter_store=parameter_store,
            overrides=environment_source,
            config=config,
            health=health,
        )
        flags = TenantFlagResolver(
            cache=cache,
            overrides=flag_overrides,
            ttl=config.cache_ttl,
            timeout=config.remote_timeout,
            health=health,
            remote=flag_fallback is not None,
            fallback=flag_fallback,
        )

        return cls(
            config=config,
            cache=cache,
            health=health,
            capabilities=capabilities,
            flags=flags,
            flag_health=FlagHealthChecker(flag_probe),
            registry=CapabilityRegistryBuilder(
                capabilities=capabilities,
                flags=flags,
                health=health,
            ),
        )

    def close(self) -> None:
        """Drop cached values and health state."""
        self.cache.clear()
        self.health.reset()


_runtime: Runtime | None = None


def configure(runtime: Runtime) -> None:
    """Install ``runtime`` as the process-wide instance.

    Example:
        configure(Runtime.create(ResolverConfig(region="eu-west-1")))
    """
    global _runtime
    _runtime = runtime


def get_runtime() -> Runtime:
    """Get the process-wide runtime, creating it from the environment if needed."""
    global _runtime
    if _runtime is None:
        _runtime = Runtime.create(ResolverConfig.from_env())
        logger.debug("Created default capflags runtime")
    return _runtime


def reset() -> None:
    """Tear down the process-wide runtime."""
    global _runtime
    if _runtime is not None:
        _runtime.close()
    _runtime = None


async def resolve_capability(
    capability: str,
    environment: Environment | str | None = None,
) -> ResolutionResult:
    return await get_runtime().capabilities.resolve_capability(capability, environment)


async def resolve_capability_url(
    capability: str,
    environment: Environment | str | None = None,
) -> str:
    """Resolve a capability base URL; never fails for a valid capability."""
    return await get_runtime().capabilities.resolve_url(capability, environment)


async def resolve_tenant_flag(
    flag_key: str,
    tenant_id: str | None = None,
    client_id: str | None = None,
) -> ResolutionResult:
    """Resolve one flag with tenant → global → default precedence."""
    return await get_runtime().flags.resolve_flag(flag_key, tenant_id, client_id)


async def resolve_tenant_flags(
    flag_keys: Iterable[str],
    tenant_id: str | None = None,
    client_id: str | None = None,
) -> dict[str, ResolutionResult]:
    return await get_runtime().flags.resolve_flags(flag_keys, tenant_id, client_id)


async def check_flag_health() -> HealthCheckResult:
    return await get_runtime().flag_health.check()


def last_capability_result() -> ResolutionResult | None:
    """Return the most recent capability resolution result."""
    return get_runtime().capabilities.last_result


def clear_cache() -> None:
    get_runtime().cache.clear()


def get_cache_stats() -> dict[str, Any]:
    return get_runtime().cache.stats()
