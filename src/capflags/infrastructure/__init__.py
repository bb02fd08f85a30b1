"""Infrastructure layer implementations for capflags."""

from capflags.infrastructure.cache import ExpiringCache
from capflags.infrastructure.probes import StaticReachabilityProbe
from capflags.infrastructure.sources import (
    DynamoDBOverrideSource,
    EnvironmentOverrideSource,
    SSMParameterStore,
)

__all__ = [
    "ExpiringCache",
    "StaticReachabilityProbe",
    "DynamoDBOverrideSource",
    "EnvironmentOverrideSource",
    "SSMParameterStore",
]
