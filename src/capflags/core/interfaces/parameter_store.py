"""Remote parameter store interface."""

from typing import Protocol


class IParameterStore(Protocol):
    """Read-only hierarchical key/value configuration service."""

    async def get_parameter(self, name: str) -> str | None:
        """Look up a parameter by its full path.

        Args:
            name: Parameter path, e.g.
                ``/stackpro/sandbox/capabilities/messaging/base-url``.

        Returns:
            The plain string value, or None if the parameter does not exist.

        Raises:
            SourceUnavailableError: If the store could not be queried.
        """
        ...
