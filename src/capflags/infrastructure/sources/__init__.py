"""Value sources backing the resolvers."""

from capflags.infrastructure.sources.overrides import (
    DynamoDBOverrideSource,
    EnvironmentOverrideSource,
)
from capflags.infrastructure.sources.parameter_store import SSMParameterStore

__all__ = [
    "DynamoDBOverrideSource",
    "EnvironmentOverrideSource",
    "SSMParameterStore",
]
