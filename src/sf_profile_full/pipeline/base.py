"""Protocol for the remote metadata capability consumed by the pipeline."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetadataConnection(Protocol):
    """Duck-typed protocol for a Metadata API connection.

    Both calls may return a bare record, a list of records, or ``None``
    depending on how many records the service has to send back.
    """

    async def read(self, type_name: str, full_names: list[str]) -> Any:
        """Read up to ten records of ``type_name`` by full name."""
        ...

    async def list(self, type_name: str) -> Any:
        """List the records of ``type_name`` known to the org."""
        ...
