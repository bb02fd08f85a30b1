"""Resolution request and result entities."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from capflags.core.exceptions import InvalidEnvironmentError


class ResolutionKind(Enum):
    """Resolution domain a request belongs to."""

    CAPABILITY = "capability"
    FLAG = "flag"


class Environment(Enum):
    """Deployment environment tag."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: "Environment | str") -> "Environment":
        """Coerce a string tag into an Environment.

        Raises:
            InvalidEnvironmentError: If the tag is not a known environment.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidEnvironmentError(value) from None


class ResolutionSource(Enum):
    """Tier that satisfied a resolution request."""

    CACHE = "cache"
    TENANT = "tenant"
    GLOBAL = "global"
    REMOTE = "remote"
    DEFAULT = "default"


FlagValue = bool | str


@dataclass(frozen=True)
class ResolutionRequest:
    """A single value to resolve, with its scoping context."""

    kind: ResolutionKind
    subject: str
    tenant_id: str | None = None
    client_id: str | None = None
    environment: Environment | None = None

    def __post_init__(self) -> None:
        if self.kind is ResolutionKind.CAPABILITY and self.environment is None:
            raise InvalidEnvironmentError(None)

    @classmethod
    def capability(
        cls, capability: str, environment: Environment | str
    ) -> "ResolutionRequest":
        """Build a capability base URL request."""
        return cls(
            kind=ResolutionKind.CAPABILITY,
            subject=capability,
            environment=Environment.parse(environment),
        )

    @classmethod
    def flag(
        cls,
        flag_key: str,
        tenant_id: str | None = None,
        client_id: str | None = None,
    ) -> "ResolutionRequest":
        """Build a tenant flag request."""
        return cls(
            kind=ResolutionKind.FLAG,
            subject=flag_key,
            tenant_id=tenant_id or None,
            client_id=client_id or None,
        )


@dataclass(frozen=True)
class ResolutionResult:
    """A resolved value annotated with its provenance.

    Attributes:
        value: The resolved payload (URL string, boolean or variant string).
        source: The tier that produced the value.
        degraded: True if a source failed during the walk and a
            lower-confidence tier had to answer instead.
    """

    value: Any
    source: ResolutionSource
    degraded: bool = False

    def from_cache(self) -> "ResolutionResult":
        """Return a copy of this result attributed to the cache tier."""
        return ResolutionResult(
            value=self.value,
            source=ResolutionSource.CACHE,
            degraded=self.degraded,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "value": self.value,
            "source": self.source.value,
            "degraded": self.degraded,
        }
