"""Naming-convention key construction.

Every override name, parameter path and tenant key used by the
resolvers is built here, so malformed or colliding keys are rejected in
one place.
"""

import re

from capflags.core.exceptions import InvalidKeyError

VARIANT_SUFFIX = "_VARIANT"
TENANT_SEPARATOR = ":tenant:"

_CAPABILITY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_FLAG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")
_SCOPE_RE = re.compile(r"^[^:|\s]+$")


def check_capability(capability: str) -> str:
    """Validate a capability identifier such as ``messaging`` or ``data-lake``."""
    if not isinstance(capability, str) or not _CAPABILITY_RE.match(capability):
        raise InvalidKeyError(f"Invalid capability id: {capability!r}")
    return capability


def check_flag_key(flag_key: str) -> str:
    """Validate a flag key such as ``CAP_MESSAGING_ENABLED``."""
    if not isinstance(flag_key, str) or not _FLAG_RE.match(flag_key):
        raise InvalidKeyError(f"Invalid flag key: {flag_key!r}")
    return flag_key


def check_scope_id(value: str | None, label: str = "tenant id") -> str | None:
    """Validate an optional tenant or client id. Empty values become None."""
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not _SCOPE_RE.match(value):
        raise InvalidKeyError(f"Invalid {label}: {value!r}")
    return value


def capability_env_var(capability: str) -> str:
    """Return the override variable for a capability base URL.

    >>> capability_env_var("data-lake")
    'CAP_DATA_LAKE_BASE_URL'
    """
    name = check_capability(capability).upper().replace("-", "_")
    return f"CAP_{name}_BASE_URL"


def capability_parameter_path(product: str, environment: str, capability: str) -> str:
    """Return the parameter store path holding a capability base URL."""
    return f"/{product}/{environment}/capabilities/{check_capability(capability)}/base-url"


def tenant_override_key(flag_key: str, tenant_id: str) -> str:
    """Return the override key scoping ``flag_key`` to one tenant."""
    tenant = check_scope_id(tenant_id)
    if tenant is None:
        raise InvalidKeyError("tenant id is required for a tenant override key")
    return f"{check_flag_key(flag_key)}{TENANT_SEPARATOR}{tenant}"


def variant_key(flag_key: str) -> str:
    """Return the companion key holding a flag's variant."""
    return f"{check_flag_key(flag_key)}{VARIANT_SUFFIX}"
