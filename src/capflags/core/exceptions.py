"""Exceptions raised by capflags."""


class CapflagsError(Exception):
    """Base class for all capflags errors."""


class ConfigurationError(CapflagsError):
    """Raised when resolver configuration values are invalid."""


class InvalidEnvironmentError(CapflagsError, ValueError):
    """Raised when an unknown deployment environment tag is supplied."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown environment: {value!r}")
        self.value = value


class SourceUnavailableError(CapflagsError):
    """Raised by a value source that could not produce an answer.

    Resolvers never let this escape to callers; it is caught by the
    source chain and turned into a degraded result.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source} unavailable: {reason}")
        self.source = source
        self.reason = reason


class InvalidKeyError(CapflagsError, ValueError):
    """Raised when a capability id, flag key or tenant id cannot form a key."""
