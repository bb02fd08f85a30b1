"""Resolver configuration entity."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

from capflags.core.entities.resolution import Environment
from capflags.core.exceptions import ConfigurationError

DEFAULT_CACHE_TTL = timedelta(milliseconds=60_000)
DEFAULT_FALLBACK_URL = "/api"


@dataclass
class ResolverConfig:
    """Resolver configuration.

    Shared by the capability resolver, the tenant flag resolver and the
    AWS-backed sources. Values can be given directly or read from the
    process environment with :meth:`from_env`.
    """

    product: str = "stackpro"
    region: str = "us-west-2"
    default_environment: Environment = Environment.SANDBOX

    # Cache
    cache_ttl: timedelta | None = None
    cache_maxsize: int = 1024

    # Remote parameter store
    remote_timeout: float = 2.0
    fallback_url: str = DEFAULT_FALLBACK_URL

    # Flag overrides (None means process environment only)
    flags_table: str | None = None

    # Consecutive remote failures before health is reported as error
    error_threshold: int = 3

    def __post_init__(self) -> None:
        """Set default TTL and validate values."""
        if self.cache_ttl is None:
            self.cache_ttl = DEFAULT_CACHE_TTL
        self.default_environment = Environment.parse(self.default_environment)

        if self.cache_ttl <= timedelta(0):
            raise ConfigurationError("cache_ttl must be positive")
        if self.cache_maxsize < 1:
            raise ConfigurationError("cache_maxsize must be at least 1")
        if self.remote_timeout <= 0:
            raise ConfigurationError("remote_timeout must be positive")
        if self.error_threshold < 1:
            raise ConfigurationError("error_threshold must be at least 1")
        if not self.product:
            raise ConfigurationError("product must not be empty")
        if not self.fallback_url:
            raise ConfigurationError("fallback_url must not be empty")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ResolverConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            A new ResolverConfig instance.

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ

        try:
            ttl_ms = int(env.get("CAPFLAGS_CACHE_TTL_MS", "60000"))
            maxsize = int(env.get("CAPFLAGS_CACHE_MAXSIZE", "1024"))
            timeout = float(env.get("CAPFLAGS_REMOTE_TIMEOUT", "2.0"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        return cls(
            product=env.get("CAPFLAGS_PRODUCT", "stackpro"),
            region=env.get("AWS_REGION", "us-west-2"),
            default_environment=Environment.parse(env.get("STACKPRO_ENV", "sandbox")),
            cache_ttl=timedelta(milliseconds=ttl_ms),
            cache_maxsize=maxsize,
            remote_timeout=timeout,
            flags_table=env.get("FLAGS_DYNAMO_TABLE") or None,
        )
