"""Capability resolver - base URL lookup for platform capabilities."""

from typing import Any

from capflags.core.entities.config import ResolverConfig
from capflags.core.entities.resolution import (
    Environment,
    ResolutionRequest,
    ResolutionResult,
    ResolutionSource,
)
from capflags.core.interfaces.cache import IExpiringCache
from capflags.core.interfaces.override_source import IOverrideSource
from capflags.core.interfaces.parameter_store import IParameterStore
from capflags.core.services.health import HealthTracker
from capflags.core.services.source_chain import SourceChainResolver, ValueSource
from capflags.utils.keys import (
    capability_env_var,
    capability_parameter_path,
    check_capability,
)

KNOWN_CAPABILITIES = ("messaging", "datalake", "ai", "billing")


class CapabilityResolver(SourceChainResolver):
    """Resolves the base URL of a capability.

    Resolution order: cache, ``CAP_<NAME>_BASE_URL`` override, remote
    parameter store (``/<product>/<env>/capabilities/<name>/base-url``),
    then the static fallback URL. Always returns a usable URL.
    """

    def __init__(
        self,
        cache: IExpiringCache,
        parameter_store: IParameterStore,
        overrides: IOverrideSource,
        config: ResolverConfig | None = None,
        health: HealthTracker | None = None,
    ) -> None:
        """Initialize the capability resolver.

        Args:
            cache: Shared expiring cache.
            parameter_store: Remote store holding base URLs.
            overrides: Source of ``CAP_<NAME>_BASE_URL`` overrides.
            config: Resolver configuration. Uses defaults if not provided.
            health: Optional tracker for parameter store outcomes.
        """
        self._config = config or ResolverConfig()
        super().__init__(
            cache=cache,
            ttl=self._config.cache_ttl,
            timeout=self._config.remote_timeout,
            health=health,
        )
        self._parameter_store = parameter_store
        self._overrides = overrides

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @property
    def parameter_store_name(self) -> str:
        """Name under which parameter store outcomes are tracked."""
        return getattr(self._parameter_store, "name", "parameter-store")

    def sources(self, request: ResolutionRequest) -> list[ValueSource]:
        return [
            ValueSource(
                name=self._overrides.name,
                tier=ResolutionSource.GLOBAL,
                lookup=self._from_override,
            ),
            ValueSource(
                name=self.parameter_store_name,
                tier=ResolutionSource.REMOTE,
                lookup=self._from_parameter_store,
                remote=True,
            ),
        ]

    def default(self, request: ResolutionRequest) -> str:
        return self._config.fallback_url

    def accept(self, value: Any) -> bool:
        # Empty strings count as unset at every tier.
        return isinstance(value, str) and value != ""

    async def resolve_capability(
        self,
        capability: str,
        environment: Environment | str | None = None,
    ) -> ResolutionResult:
        """Resolve a capability base URL with provenance.

        Args:
            capability: Capability identifier, e.g. ``messaging``.
            environment: Deployment environment. Defaults to the
                configured default environment.

        Returns:
            The URL and the tier that produced it.

        Raises:
            InvalidKeyError: If the capability id is malformed.
            InvalidEnvironmentError: If the environment is unknown.
        """
        request = ResolutionRequest.capability(
            check_capability(capability),
            environment if environment is not None else self._config.default_environment,
        )
        return await self.resolve(request)

    async def resolve_url(
        self,
        capability: str,
        environment: Environment | str | None = None,
    ) -> str:
        """Resolve a capability base URL.

        Returns:
            A non-empty URL; the fallback URL when no source has one.
        """
        result = await self.resolve_capability(capability, environment)
        return result.value

    def _from_override(self, request: ResolutionRequest) -> Any:
        return self._overrides.get(capability_env_var(request.subject))

    def _from_parameter_store(self, request: ResolutionRequest) -> Any:
        environment = request.environment or self._config.default_environment
        path = capability_parameter_path(
            self._config.product,
            environment.value,
            request.subject,
        )
        return self._parameter_store.get_parameter(path)
