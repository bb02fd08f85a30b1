"""Flag and URL override sources."""

import asyncio
import logging
import os
from collections.abc import Mapping
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from capflags.core.entities.capability import HealthCheckResult
from capflags.core.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)


class EnvironmentOverrideSource:
    """Overrides read from a flat string mapping, ``os.environ`` by default.

    The mapping is read at lookup time, so changes to the process
    environment are visible once the corresponding cache entry expires.
    """

    name = "environment"

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def get(self, key: str) -> str | None:
        return self.environ.get(key)

    def keys(self) -> list[str]:
        return list(self.environ.keys())


class DynamoDBOverrideSource:
    """Overrides stored as items in a DynamoDB table.

    Each item is keyed by ``flagKey`` (the bare flag key or the
    ``<flag>:tenant:<id>`` form) and carries the raw string in ``value``.
    Also usable as a reachability probe for flag health checks.
    """

    name = "dynamodb"

    def __init__(
        self,
        table_name: str = "stackpro-flags",
        region: str = "us-west-2",
        timeout: float = 2.0,
        client: Any | None = None,
    ) -> None:
        self._table_name = table_name
        self._region = region
        self._timeout = timeout
        self._client = client
        self._known_keys: set[str] = set()

    def _get_client(self) -> Any:
        """Get (or create) the DynamoDB client."""
        if self._client is None:
            self._client = boto3.client(
                "dynamodb",
                region_name=self._region,
                config=Config(
                    connect_timeout=self._timeout,
                    read_timeout=self._timeout,
                    retries={"max_attempts": 2, "mode": "standard"},
                ),
            )
        return self._client

    def _fetch(self, key: str) -> str | None:
        try:
            response = self._get_client().get_item(
                TableName=self._table_name,
                Key={"flagKey": {"S": key}},
                ConsistentRead=False,
            )
        except (ClientError, BotoCoreError) as e:
            raise SourceUnavailableError(self.name, str(e)) from e

        attribute = response.get("Item", {}).get("value")
        if attribute is None:
            return None
        self._known_keys.add(key)
        if "S" in attribute:
            return attribute["S"]
        if "BOOL" in attribute:
            return "true" if attribute["BOOL"] else "false"
        if "N" in attribute:
            return attribute["N"]
        logger.warning("Unsupported override type for %s: %s", key, sorted(attribute))
        return None

    async def get(self, key: str) -> str | None:
        """Fetch the raw override for ``key``.

        Raises:
            SourceUnavailableError: If the table could not be read.
        """
        return await asyncio.to_thread(self._fetch, key)

    def keys(self) -> list[str]:
        """Return override keys seen so far; the table is never scanned."""
        return sorted(self._known_keys)

    def _describe(self) -> None:
        self._get_client().describe_table(TableName=self._table_name)

    async def check(self) -> HealthCheckResult:
        """Check that the override table can be described."""
        try:
            await asyncio.wait_for(asyncio.to_thread(self._describe), self._timeout)
        except asyncio.TimeoutError:
            return HealthCheckResult.failed(f"{self._table_name}: timed out")
        except (ClientError, BotoCoreError) as e:
            logger.warning("Override table %s unreachable: %s", self._table_name, e)
            return HealthCheckResult.failed(f"{self._table_name}: {e}")
        return HealthCheckResult.ok()
