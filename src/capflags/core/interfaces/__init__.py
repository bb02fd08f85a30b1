"""Core interfaces (Protocol classes) for capflags."""

from capflags.core.interfaces.cache import IExpiringCache
from capflags.core.interfaces.override_source import IOverrideSource
from capflags.core.interfaces.parameter_store import IParameterStore
from capflags.core.interfaces.probe import IReachabilityProbe

__all__ = [
    "IExpiringCache",
    "IOverrideSource",
    "IParameterStore",
    "IReachabilityProbe",
]
