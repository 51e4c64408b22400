"""Batched Profile retrieval through ``readMetadata``.

``readMetadata`` accepts at most ten full names per call, so larger requests
are split into contiguous chunks and read one chunk at a time. Each returned
record is canonicalized and rendered to XML independently; a record that
cannot be built becomes a ``Failure`` for that name only.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import TYPE_CHECKING, Any

from sf_profile_full.constants import BATCH_SIZE, PROFILE_RECORD_TYPE
from sf_profile_full.core.types import Failure, Result, RetrievedProfile, Success
from sf_profile_full.exceptions import (
    MetadataCallError,
    ProfileBuildError,
    ProfileXmlError,
)
from sf_profile_full.pipeline.document import build_profile_document, get_full_name
from sf_profile_full.pipeline.xml_codec import to_xml
from sf_profile_full.telemetry import TelemetryContext

if TYPE_CHECKING:
    from sf_profile_full.pipeline.base import MetadataConnection
    from sf_profile_full.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)

__all__ = ["ProfileMetadataService", "as_record_list", "chunked"]


def chunked(items: Sequence[str], size: int = BATCH_SIZE) -> list[list[str]]:
    """Split ``items`` into contiguous chunks of at most ``size`` elements.

    Order is preserved within and across chunks; only the last chunk may be
    shorter. An empty input yields no chunks.
    """
    if not isinstance(size, int) or not 1 <= size <= BATCH_SIZE:
        raise ValueError(f"Batch size must be between 1 and {BATCH_SIZE}, got {size!r}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def as_record_list(raw: Any) -> list[Any]:
    """Normalize a single-record-or-list API response into a list."""
    if raw is None:
        return []
    if isinstance(raw, list | tuple):
        return list(raw)
    return [raw]


class ProfileMetadataService:
    """Reads metadata records in bounded batches and renders them as XML."""

    def __init__(
        self,
        connection: MetadataConnection,
        *,
        batch_size: int = BATCH_SIZE,
        record_type: str = PROFILE_RECORD_TYPE,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            connection: The remote metadata capability.
            batch_size: Names per ``read`` call (1 to 10).
            record_type: Metadata type to read, also the document root tag.
            telemetry: Optional telemetry context; no-op when omitted.
        """
        if not 1 <= batch_size <= BATCH_SIZE:
            raise ValueError(
                f"Batch size must be between 1 and {BATCH_SIZE}, got {batch_size}"
            )
        self.connection = connection
        self.batch_size = batch_size
        self.record_type = record_type
        self._ctx = telemetry or TelemetryContext()

    async def retrieve(
        self, names: Sequence[str]
    ) -> list[Result[RetrievedProfile, ProfileBuildError]]:
        """Retrieve full records for ``names``.

        Returns one entry per record that came back with a ``fullName``,
        in per-chunk result order. Names the service did not return simply
        do not appear; reconciling them is up to the caller.

        Raises:
            MetadataCallError: If any ``read`` call fails.
        """
        results: list[Result[RetrievedProfile, ProfileBuildError]] = []
        batches = chunked(names, self.batch_size)

        for index, batch in enumerate(batches, start=1):
            log.debug(
                "Reading %d %s record(s), batch %d/%d",
                len(batch),
                self.record_type,
                index,
                len(batches),
            )
            raw = await self._call("readMetadata", self.connection.read, self.record_type, batch)

            for item in as_record_list(raw):
                if get_full_name(item) is None:
                    log.warning("Skipping %s entry without fullName", self.record_type)
                    self._ctx.count("profiles.skipped")
                    continue
                results.append(self._build(item))

        return results

    async def list_names(self) -> list[str]:
        """Return the full names of every record of this type in the org.

        Raises:
            MetadataCallError: If the ``list`` call fails.
        """
        raw = await self._call("listMetadata", self.connection.list, self.record_type)
        names = [
            name
            for name in (get_full_name(item) for item in as_record_list(raw))
            if name is not None
        ]
        log.debug("Listed %d %s record(s)", len(names), self.record_type)
        return names

    async def _call(self, operation: str, func: Any, *args: Any) -> Any:
        with self._ctx(f"metadata.{operation}"):
            try:
                return await func(*args)
            except MetadataCallError:
                raise
            except Exception as e:
                log.error("%s call failed: %s", operation, e)
                raise MetadataCallError(f"{operation} failed: {e}", operation) from e

    def _build(self, record: Mapping[str, Any]) -> Result[RetrievedProfile, ProfileBuildError]:
        full_name = get_full_name(record)
        built = build_profile_document(record, record_type=self.record_type)
        if isinstance(built, Failure):
            return Failure(ProfileBuildError(str(built.error), full_name))

        try:
            xml = to_xml(built.value.tree)
        except (ProfileXmlError, TypeError, ValueError) as e:
            log.warning("Could not render %s %s: %s", self.record_type, full_name, e)
            self._ctx.count("profiles.build_failed")
            return Failure(ProfileBuildError(f"Failed to render XML: {e}", full_name))

        return Success(RetrievedProfile(full_name=built.value.full_name, xml=xml))
