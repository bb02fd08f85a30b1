"""Core domain layer for capflags."""

from capflags.core.entities import (
    CacheEntry,
    Environment,
    ResolutionKey,
    ResolutionRequest,
    ResolutionResult,
    ResolutionSource,
    ResolverConfig,
)
from capflags.core.interfaces import (
    IExpiringCache,
    IOverrideSource,
    IParameterStore,
    IReachabilityProbe,
)
from capflags.core.services import (
    CapabilityResolver,
    SourceChainResolver,
    TenantFlagResolver,
)

__all__ = [
    # Entities
    "CacheEntry",
    "Environment",
    "ResolutionKey",
    "ResolutionRequest",
    "ResolutionResult",
    "ResolutionSource",
    "ResolverConfig",
    # Interfaces
    "IExpiringCache",
    "IOverrideSource",
    "IParameterStore",
    "IReachabilityProbe",
    # Services
    "CapabilityResolver",
    "SourceChainResolver",
    "TenantFlagResolver",
]
