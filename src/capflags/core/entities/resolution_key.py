"""Resolution key value object."""

from dataclasses import dataclass

from capflags.core.entities.resolution import ResolutionKind, ResolutionRequest


@dataclass(frozen=True)
class ResolutionKey:
    """Immutable cache key for one resolvable value.

    Keys are namespaced by resolution kind, so a capability and a flag
    sharing a subject name never collide in the shared cache.
    """

    kind: ResolutionKind
    subject: str
    environment: str | None = None
    tenant_id: str | None = None
    client_id: str | None = None

    def __str__(self) -> str:
        """Return the full cache key string.

        Returns:
            Something like ``capability:messaging:sandbox`` or
            ``flag:CAP_MESSAGING_ENABLED|tenant:t1``.
        """
        parts = [self.kind.value, self.subject]
        if self.environment:
            parts.append(self.environment)
        key = ":".join(parts)
        if self.tenant_id:
            key += f"|tenant:{self.tenant_id}"
        if self.client_id:
            key += f"|client:{self.client_id}"
        return key

    @classmethod
    def from_request(cls, request: ResolutionRequest) -> "ResolutionKey":
        """Create a ResolutionKey from a resolution request.

        Args:
            request: The request to derive the key from.

        Returns:
            A new ResolutionKey instance.
        """
        return cls(
            kind=request.kind,
            subject=request.subject,
            environment=request.environment.value if request.environment else None,
            tenant_id=request.tenant_id,
            client_id=request.client_id,
        )
