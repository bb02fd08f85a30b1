"""Cache implementations."""

from capflags.infrastructure.cache.expiring import ExpiringCache

__all__ = ["ExpiringCache"]
