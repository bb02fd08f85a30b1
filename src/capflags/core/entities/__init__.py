"""Domain entities for capflags."""

from capflags.core.entities.cache_entry import CacheEntry
from capflags.core.entities.capability import (
    CapabilityDefinition,
    CapabilityRegistry,
    CapabilityScope,
    HealthCheckResult,
    HealthStatus,
    SdkInfo,
    create_capability_definition,
    validate_capability,
)
from capflags.core.entities.config import (
    DEFAULT_CACHE_TTL,
    DEFAULT_FALLBACK_URL,
    ResolverConfig,
)
from capflags.core.entities.resolution import (
    Environment,
    FlagValue,
    ResolutionKind,
    ResolutionRequest,
    ResolutionResult,
    ResolutionSource,
)
from capflags.core.entities.resolution_key import ResolutionKey

__all__ = [
    "CacheEntry",
    "ResolutionKey",
    "ResolverConfig",
    "DEFAULT_CACHE_TTL",
    "DEFAULT_FALLBACK_URL",
    # Resolution
    "Environment",
    "FlagValue",
    "ResolutionKind",
    "ResolutionRequest",
    "ResolutionResult",
    "ResolutionSource",
    # Capability metadata
    "CapabilityDefinition",
    "CapabilityRegistry",
    "CapabilityScope",
    "HealthCheckResult",
    "HealthStatus",
    "SdkInfo",
    "create_capability_definition",
    "validate_capability",
]
