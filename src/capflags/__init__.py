"""capflags - capability discovery and tenant feature flag resolution.

Resolves capability base URLs and per-tenant feature flags by walking an
ordered chain of sources (in-process cache, overrides, a remote parameter
store, compiled-in defaults). Resolution favors availability: a failing
source never raises to the caller, it only marks the result degraded.

Example:
    from capflags import (
        CapabilityResolver,
        EnvironmentOverrideSource,
        ExpiringCache,
        SSMParameterStore,
        TenantFlagResolver,
    )

    cache = ExpiringCache()
    env = EnvironmentOverrideSource()
    capabilities = CapabilityResolver(
        cache=cache,
        parameter_store=SSMParameterStore(region="us-west-2"),
        overrides=env,
    )
    flags = TenantFlagResolver(cache=cache, overrides=env)

    url = await capabilities.resolve_url("messaging", "sandbox")
    result = await flags.resolve_flag("CAP_MESSAGING_ENABLED", tenant_id="t-1")
    if result.degraded:
        ...

Module-level helpers backed by a process-wide runtime:
    from capflags import resolve_capability_url, resolve_tenant_flag

    url = await resolve_capability_url("datalake", "production")
"""

from capflags.core.entities import (
    DEFAULT_CACHE_TTL,
    DEFAULT_FALLBACK_URL,
    CacheEntry,
    CapabilityDefinition,
    CapabilityRegistry,
    CapabilityScope,
    Environment,
    HealthCheckResult,
    HealthStatus,
    ResolutionKey,
    ResolutionKind,
    ResolutionRequest,
    ResolutionResult,
    ResolutionSource,
    ResolverConfig,
    SdkInfo,
    create_capability_definition,
    validate_capability,
)
from capflags.core.exceptions import (
    CapflagsError,
    ConfigurationError,
    InvalidEnvironmentError,
    InvalidKeyError,
    SourceUnavailableError,
)
from capflags.core.interfaces import (
    IExpiringCache,
    IOverrideSource,
    IParameterStore,
    IReachabilityProbe,
)
from capflags.core.services import (
    DEFAULT_FLAGS,
    CapabilityRegistryBuilder,
    CapabilityResolver,
    FlagHealthChecker,
    HealthTracker,
    RegistryEntry,
    SourceChainResolver,
    TenantFlagResolver,
    ValueSource,
    coerce_flag_value,
)
from capflags.infrastructure import (
    DynamoDBOverrideSource,
    EnvironmentOverrideSource,
    ExpiringCache,
    SSMParameterStore,
    StaticReachabilityProbe,
)
from capflags.runtime import (
    Runtime,
    check_flag_health,
    clear_cache,
    configure,
    get_cache_stats,
    get_runtime,
    last_capability_result,
    resolve_capability,
    resolve_capability_url,
    resolve_tenant_flag,
    resolve_tenant_flags,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheEntry",
    "ResolutionKey",
    "ResolutionKind",
    "ResolutionRequest",
    "ResolutionResult",
    "ResolutionSource",
    "Environment",
    "ResolverConfig",
    "DEFAULT_CACHE_TTL",
    "DEFAULT_FALLBACK_URL",
    # Capability metadata
    "CapabilityDefinition",
    "CapabilityRegistry",
    "CapabilityScope",
    "HealthCheckResult",
    "HealthStatus",
    "SdkInfo",
    "create_capability_definition",
    "validate_capability",
    # Errors
    "CapflagsError",
    "ConfigurationError",
    "InvalidEnvironmentError",
    "InvalidKeyError",
    "SourceUnavailableError",
    # Core interfaces
    "IExpiringCache",
    "IOverrideSource",
    "IParameterStore",
    "IReachabilityProbe",
    # Core services
    "SourceChainResolver",
    "ValueSource",
    "CapabilityResolver",
    "TenantFlagResolver",
    "DEFAULT_FLAGS",
    "coerce_flag_value",
    "HealthTracker",
    "FlagHealthChecker",
    "CapabilityRegistryBuilder",
    "RegistryEntry",
    # Infrastructure implementations
    "ExpiringCache",
    "EnvironmentOverrideSource",
    "DynamoDBOverrideSource",
    "SSMParameterStore",
    "StaticReachabilityProbe",
    # Runtime
    "Runtime",
    "configure",
    "get_runtime",
    "resolve_capability",
    "resolve_capability_url",
    "resolve_tenant_flag",
    "resolve_tenant_flags",
    "check_flag_health",
    "last_capability_result",
    "clear_cache",
    "get_cache_stats",
]
