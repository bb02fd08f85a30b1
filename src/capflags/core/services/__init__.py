"""Domain services for capflags."""

from capflags.core.services.capability_resolver import (
    KNOWN_CAPABILITIES,
    CapabilityResolver,
)
from capflags.core.services.flag_resolver import (
    DEFAULT_FLAGS,
    DEFAULT_VARIANT,
    TenantFlagResolver,
    coerce_flag_value,
)
from capflags.core.services.health import FlagHealthChecker, HealthTracker
from capflags.core.services.registry import (
    DEFAULT_REGISTRY_ENTRIES,
    CapabilityRegistryBuilder,
    RegistryEntry,
)
from capflags.core.services.source_chain import SourceChainResolver, ValueSource

__all__ = [
    # Source chain
    "SourceChainResolver",
    "ValueSource",
    # Resolvers
    "CapabilityResolver",
    "KNOWN_CAPABILITIES",
    "TenantFlagResolver",
    "DEFAULT_FLAGS",
    "DEFAULT_VARIANT",
    "coerce_flag_value",
    # Health
    "HealthTracker",
    "FlagHealthChecker",
    # Registry
    "CapabilityRegistryBuilder",
    "RegistryEntry",
    "DEFAULT_REGISTRY_ENTRIES",
]
