"""Capability definition and registry entities.

These describe a capability's full metadata for discovery APIs, not
just its base URL.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeGuard


class HealthStatus(Enum):
    """Health of a capability or of a backing store."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"
    ERROR = "error"


class CapabilityScope(Enum):
    """Permission scopes a capability can grant."""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"
    INGEST = "ingest"
    QUERY = "query"


@dataclass(frozen=True)
class SdkInfo:
    """Client SDK published for a capability."""

    npm: str
    version: str


@dataclass
class CapabilityDefinition:
    """Full metadata of one capability.

    ``base_url`` is None whenever the capability is disabled or no
    source produced a URL. An ``ERROR`` health implies ``degraded``.
    """

    id: str
    version: str = "1.0.0"
    enabled: bool = False
    degraded: bool = False
    base_url: str | None = None
    scopes: list[str] = field(default_factory=lambda: [CapabilityScope.READ.value])
    health: HealthStatus = HealthStatus.UNKNOWN
    sdk: SdkInfo | None = None
    contract: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation (camelCase keys)."""
        data: dict[str, Any] = {
            "id": self.id,
            "version": self.version,
            "enabled": self.enabled,
            "degraded": self.degraded,
            "baseUrl": self.base_url,
            "scopes": list(self.scopes),
            "health": self.health.value,
        }
        if self.sdk is not None:
            data["sdk"] = asdict(self.sdk)
        if self.contract is not None:
            data["contract"] = self.contract
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class HealthCheckResult:
    """Outcome of a reachability check."""

    healthy: bool
    degraded: bool
    reason: str | None = None
    last_check: datetime | None = None

    @classmethod
    def ok(cls) -> "HealthCheckResult":
        return cls(healthy=True, degraded=False, last_check=datetime.now(timezone.utc))

    @classmethod
    def failed(cls, reason: str) -> "HealthCheckResult":
        return cls(
            healthy=False,
            degraded=True,
            reason=reason,
            last_check=datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"healthy": self.healthy, "degraded": self.degraded}
        if self.reason is not None:
            data["reason"] = self.reason
        if self.last_check is not None:
            data["lastCheck"] = self.last_check.isoformat()
        return data


@dataclass
class CapabilityRegistry:
    """Snapshot of every known capability for one environment."""

    env: str
    version: str
    capabilities: list[CapabilityDefinition] = field(default_factory=list)
    request_id: str | None = None
    timestamp: datetime | None = None

    @property
    def degraded(self) -> bool:
        """True if any capability in the registry is degraded."""
        return any(capability.degraded for capability in self.capabilities)

    def to_dict(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "timestamp": (self.timestamp or datetime.now(timezone.utc)).isoformat(),
            "degraded": self.degraded,
        }
        if self.request_id is not None:
            metadata["requestId"] = self.request_id
        return {
            "env": self.env,
            "version": self.version,
            "capabilities": [capability.to_dict() for capability in self.capabilities],
            "metadata": metadata,
        }


def create_capability_definition(id: str, **overrides: Any) -> CapabilityDefinition:
    """Create a capability definition with safe defaults.

    Defaults are disabled, not degraded, no base URL, ``read`` scope only
    and unknown health. Any field may be overridden by keyword.

    Args:
        id: The capability identifier.
        **overrides: Field values applied on top of the defaults.

    Returns:
        A new CapabilityDefinition.

    Raises:
        TypeError: If an override names an unknown field.
    """
    return replace(CapabilityDefinition(id=id), **overrides)


_HEALTH_VALUES = frozenset(status.value for status in HealthStatus)


def validate_capability(candidate: Any) -> TypeGuard[CapabilityDefinition | Mapping[str, Any]]:
    """Structurally validate a capability definition.

    Accepts a CapabilityDefinition instance or its wire mapping
    (``baseUrl`` key). Never raises; invalid input returns False.

    Args:
        candidate: The value to check.

    Returns:
        True if every field has the expected type and ``health`` is a
        known status.
    """
    if isinstance(candidate, CapabilityDefinition):
        data = candidate.to_dict()
    elif isinstance(candidate, Mapping):
        data = candidate
    else:
        return False

    scopes = data.get("scopes")
    health = data.get("health")
    if isinstance(health, HealthStatus):
        health = health.value

    return (
        isinstance(data.get("id"), str)
        and isinstance(data.get("version"), str)
        and isinstance(data.get("enabled"), bool)
        and isinstance(data.get("degraded"), bool)
        and "baseUrl" in data
        and (data["baseUrl"] is None or isinstance(data["baseUrl"], str))
        and isinstance(scopes, (list, tuple, set, frozenset))
        and all(isinstance(scope, str) for scope in scopes)
        and isinstance(health, str)
        and health in _HEALTH_VALUES
    )
