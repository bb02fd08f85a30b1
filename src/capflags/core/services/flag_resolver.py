"""Tenant flag resolver - per-tenant feature flags with global fallback."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from datetime import timedelta
from typing import Any

from capflags.core.entities.config import DEFAULT_CACHE_TTL
from capflags.core.entities.resolution import (
    FlagValue,
    ResolutionRequest,
    ResolutionResult,
    ResolutionSource,
)
from capflags.core.exceptions import InvalidKeyError
from capflags.core.interfaces.cache import IExpiringCache
from capflags.core.interfaces.override_source import IOverrideSource
from capflags.core.services.health import HealthTracker
from capflags.core.services.source_chain import SourceChainResolver, ValueSource
from capflags.utils.keys import (
    TENANT_SEPARATOR,
    VARIANT_SUFFIX,
    check_flag_key,
    check_scope_id,
    tenant_override_key,
    variant_key,
)

logger = logging.getLogger(__name__)

DEFAULT_FLAGS: dict[str, FlagValue] = {
    "CAP_MESSAGING_ENABLED": False,
    "CAP_DATALAKE_ENABLED": False,
    "CAP_DATA_INGESTION_ENABLED": False,
    "ONBOARDING_V2_ENABLED": False,
    "CAP_AUTH_JWT_ALLOWED": True,
    "CAP_AUTH_IAM_ALLOWED": True,
}

DEFAULT_VARIANT = "default"

GLOBAL_FLAG_PREFIXES = ("CAP_", "ONBOARDING_")


def coerce_flag_value(raw: Any) -> Any:
    """Coerce ``"true"``/``"false"`` to booleans; pass everything else through."""
    if raw == "true":
        return True
    if raw == "false":
        return False
    return raw


class TenantFlagResolver(SourceChainResolver):
    """Resolves boolean and variant flags for a tenant.

    Merge order (most specific wins): ``<flag>:tenant:<id>`` override
    when a tenant id is given, the bare ``<flag>`` override, then the
    compiled-in default. Within each tier the primary store is consulted
    before the optional local fallback, so a value missing from (or
    unreachable in) a remote table can still come from the environment.
    Raw override values go through :func:`coerce_flag_value` at every tier.
    """

    def __init__(
        self,
        cache: IExpiringCache,
        overrides: IOverrideSource,
        defaults: Mapping[str, FlagValue] | None = None,
        ttl: timedelta = DEFAULT_CACHE_TTL,
        timeout: float = 2.0,
        health: HealthTracker | None = None,
        remote: bool = False,
        fallback: IOverrideSource | None = None,
    ) -> None:
        """Initialize the flag resolver.

        Args:
            cache: Shared expiring cache.
            overrides: Backing store for tenant and global overrides.
            defaults: Compiled-in defaults. Uses DEFAULT_FLAGS if not provided.
            ttl: TTL of cached flag results.
            timeout: Upper bound in seconds for an override lookup.
            health: Optional tracker for override store outcomes.
            remote: Whether the override store is remote and should be
                reported to ``health``.
            fallback: Local store consulted after ``overrides`` at each
                tier. Never reported to ``health``.
        """
        super().__init__(cache=cache, ttl=ttl, timeout=timeout, health=health)
        self._overrides = overrides
        self._fallback = fallback
        self._defaults = dict(DEFAULT_FLAGS if defaults is None else defaults)
        self._remote = remote

    @property
    def defaults(self) -> dict[str, FlagValue]:
        return dict(self._defaults)

    def sources(self, request: ResolutionRequest) -> list[ValueSource]:
        tiers: list[tuple[ResolutionSource, str, str]] = []
        if request.tenant_id:
            tiers.append(
                (
                    ResolutionSource.TENANT,
                    "tenant",
                    tenant_override_key(request.subject, request.tenant_id),
                )
            )
        tiers.append((ResolutionSource.GLOBAL, "global", request.subject))

        stores: list[tuple[IOverrideSource, bool]] = [(self._overrides, self._remote)]
        if self._fallback is not None:
            stores.append((self._fallback, False))

        return [
            ValueSource(
                name=f"{store.name}:{label}",
                tier=tier,
                lookup=self._override_lookup(store, key),
                remote=remote,
            )
            for tier, label, key in tiers
            for store, remote in stores
        ]

    def default(self, request: ResolutionRequest) -> FlagValue:
        if request.subject in self._defaults:
            return self._defaults[request.subject]
        if request.subject.endswith(VARIANT_SUFFIX):
            return DEFAULT_VARIANT
        return False

    async def resolve_flag(
        self,
        flag_key: str,
        tenant_id: str | None = None,
        client_id: str | None = None,
    ) -> ResolutionResult:
        """Resolve one flag for a tenant.

        Args:
            flag_key: The flag key, e.g. ``CAP_MESSAGING_ENABLED``.
            tenant_id: Optional tenant scope; enables the tenant tier.
            client_id: Optional client scope; only affects caching.

        Returns:
            The flag value and the tier that produced it.

        Raises:
            InvalidKeyError: If the flag key or a scope id is malformed.
        """
        request = ResolutionRequest.flag(
            check_flag_key(flag_key),
            tenant_id=check_scope_id(tenant_id),
            client_id=check_scope_id(client_id, label="client id"),
        )
        return await self.resolve(request)

    async def resolve_flags(
        self,
        flag_keys: Iterable[str],
        tenant_id: str | None = None,
        client_id: str | None = None,
    ) -> dict[str, ResolutionResult]:
        """Resolve several flags independently.

        Each key is resolved on its own; there is no cross-key
        consistency guarantee. Malformed keys are logged and left out of
        the result instead of failing the whole batch.

        Returns:
            Mapping of each valid flag key to its result.

        Raises:
            InvalidKeyError: If a scope id is malformed.
        """
        check_scope_id(tenant_id)
        check_scope_id(client_id, label="client id")

        keys: list[str] = []
        for key in dict.fromkeys(flag_keys):
            try:
                keys.append(check_flag_key(key))
            except InvalidKeyError as e:
                logger.warning("Skipping flag in batch: %s", e)

        results = await asyncio.gather(
            *(self.resolve_flag(key, tenant_id, client_id) for key in keys)
        )
        return dict(zip(keys, results))

    async def is_enabled(
        self,
        flag_key: str,
        tenant_id: str | None = None,
        client_id: str | None = None,
    ) -> bool:
        """Return True only if the flag resolves to boolean ``True``."""
        result = await self.resolve_flag(flag_key, tenant_id, client_id)
        return result.value is True

    async def get_variant(
        self,
        flag_key: str,
        tenant_id: str | None = None,
        client_id: str | None = None,
    ) -> str:
        """Resolve the variant of a flag from its ``<FLAG>_VARIANT`` key.

        Returns:
            The variant string, ``"default"`` when nothing is set.
        """
        result = await self.resolve_flag(variant_key(flag_key), tenant_id, client_id)
        value = result.value
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def override_stats(self, tenant_id: str | None = None) -> dict[str, int]:
        """Count overrides visible in the backing store for a tenant.

        Returns:
            ``tenant_overrides``, ``global_flags`` and ``defaults`` (known
            flags with neither a tenant nor a global override). All zero
            without a tenant id.
        """
        tenant = check_scope_id(tenant_id)
        if tenant is None:
            return {"tenant_overrides": 0, "global_flags": 0, "defaults": 0}

        suffix = f"{TENANT_SEPARATOR}{tenant}"
        keys = set(self._overrides.keys())
        if self._fallback is not None:
            keys.update(self._fallback.keys())
        tenant_keys = {key for key in keys if key.endswith(suffix)}
        global_keys = {
            key
            for key in keys
            if key.startswith(GLOBAL_FLAG_PREFIXES) and TENANT_SEPARATOR not in key
        }
        overridden = {key[: -len(suffix)] for key in tenant_keys} | global_keys
        defaults = [key for key in self._defaults if key not in overridden]

        return {
            "tenant_overrides": len(tenant_keys),
            "global_flags": len(global_keys),
            "defaults": len(defaults),
        }

    def _override_lookup(
        self, store: IOverrideSource, key: str
    ) -> Callable[[ResolutionRequest], Awaitable[Any]]:
        async def lookup(_request: ResolutionRequest) -> Any:
            raw = store.get(key)
            if inspect.isawaitable(raw):
                raw = await raw
            return coerce_flag_value(raw)

        return lookup
