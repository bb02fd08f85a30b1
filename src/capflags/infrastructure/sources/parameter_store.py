"""AWS Systems Manager Parameter Store source."""

import asyncio
import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from capflags.core.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)


class SSMParameterStore:
    """Read-only parameter lookups against SSM Parameter Store.

    The boto3 client is created on first use and reused afterwards.
    Blocking SDK calls run in a worker thread so the event loop never
    stalls; botocore connect/read timeouts bound each attempt.
    """

    name = "ssm"

    def __init__(
        self,
        region: str = "us-west-2",
        timeout: float = 2.0,
        client: Any | None = None,
    ) -> None:
        """Initialize the parameter store.

        Args:
            region: AWS region of the parameter store.
            timeout: Connect and read timeout in seconds per attempt.
            client: Optional pre-built ``ssm`` client (mainly for tests).
        """
        self._region = region
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> Any:
        """Get (or create) the SSM client."""
        if self._client is None:
            self._client = boto3.client(
                "ssm",
                region_name=self._region,
                config=Config(
                    connect_timeout=self._timeout,
                    read_timeout=self._timeout,
                    retries={"max_attempts": 2, "mode": "standard"},
                ),
            )
        return self._client

    def _fetch(self, name: str) -> str | None:
        try:
            response = self._get_client().get_parameter(Name=name, WithDecryption=False)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code == "ParameterNotFound":
                logger.debug("Parameter %s not found", name)
                return None
            raise SourceUnavailableError(self.name, f"{code or 'ClientError'}: {e}") from e
        except BotoCoreError as e:
            raise SourceUnavailableError(self.name, str(e)) from e

        value = response.get("Parameter", {}).get("Value")
        return value or None

    async def get_parameter(self, name: str) -> str | None:
        """Look up a parameter by its full path.

        Args:
            name: The parameter path.

        Returns:
            The plain string value, or None if the parameter is missing or empty.

        Raises:
            SourceUnavailableError: On permission, throttling or network errors.
        """
        return await asyncio.to_thread(self._fetch, name)
