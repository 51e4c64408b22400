"""Convenience entry points for common retrieval scenarios.

These functions resolve which profiles to fetch and run the executor over a
SOAP connection built from configuration, so callers need nothing beyond a
configured org.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sf_profile_full.adapters.soap import SoapMetadataConnection
from sf_profile_full.config import FrozenConfig, resolve_frozen_config
from sf_profile_full.exceptions import ProfileSelectionError
from sf_profile_full.executor import create_executor
from sf_profile_full.files.scanner import profile_names_from_directory

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sf_profile_full.core.types import RetrieveFullResult
    from sf_profile_full.pipeline.base import MetadataConnection
    from sf_profile_full.pipeline.retriever import ProfileMetadataService
    from sf_profile_full.telemetry import TelemetryReporter


def split_names(values: Iterable[str]) -> list[str]:
    """Split comma-separated values, trimming whitespace and dropping empties."""
    return [part.strip() for value in values for part in value.split(",") if part.strip()]


async def resolve_profile_names(
    names: Iterable[str] | None = None,
    *,
    source_dir: str | Path | None = None,
    all_profiles: bool = False,
    service: ProfileMetadataService | None = None,
) -> list[str]:
    """Resolve the profile names to retrieve from exactly one selector.

    Args:
        names: Explicit names; comma-separated entries are split.
        source_dir: Directory scanned recursively for ``*.profile-meta.xml``.
        all_profiles: List every profile in the org through ``service``.
        service: Metadata service, required for ``all_profiles``.

    Returns:
        The names in selection order. Duplicates are kept.

    Raises:
        ProfileSelectionError: If zero or several selectors are given, or
            the selection is empty.
    """
    selectors = sum((names is not None, source_dir is not None, all_profiles))
    if selectors != 1:
        raise ProfileSelectionError(
            "Specify exactly one of names, source_dir or all_profiles"
        )

    if names is not None:
        resolved = split_names(names)
        if not resolved:
            raise ProfileSelectionError("No profile names given")
        return resolved

    if source_dir is not None:
        resolved = profile_names_from_directory(source_dir)
        if not resolved:
            raise ProfileSelectionError(f"No profiles found in {source_dir}")
        return resolved

    if service is None:
        raise ProfileSelectionError("Listing all profiles requires a metadata service")
    resolved = await service.list_names()
    if not resolved:
        raise ProfileSelectionError("No profiles found in the org")
    return resolved


async def retrieve_full(
    names: Iterable[str] | None = None,
    *,
    source_dir: str | Path | None = None,
    all_profiles: bool = False,
    cfg: FrozenConfig | None = None,
    connection: MetadataConnection | None = None,
    telemetry_reporters: Iterable[TelemetryReporter] = (),
) -> RetrieveFullResult:
    """Retrieve full profiles and write them in source format.

    Args:
        names: Explicit profile names.
        source_dir: Retrieve the profiles already present in this directory.
        all_profiles: Retrieve every profile in the org.
        cfg: Optional frozen configuration. If omitted, it is resolved.
        connection: Optional metadata connection; a SOAP connection built
            from ``cfg`` is used (and closed) when omitted.
        telemetry_reporters: Reporters passed to the executor.

    Returns:
        One outcome per requested name plus totals.

    Example:
        ```python
        result = await retrieve_full(["Admin", "Custom: Sales Profile"])
        print(result.total_success, result.total_failed)
        ```
    """
    final_cfg = cfg or resolve_frozen_config()
    owned: SoapMetadataConnection | None = None
    if connection is None:
        owned = SoapMetadataConnection.from_config(final_cfg)
        connection = owned

    try:
        executor = create_executor(
            connection, final_cfg, telemetry_reporters=telemetry_reporters
        )
        requested = await resolve_profile_names(
            names,
            source_dir=source_dir,
            all_profiles=all_profiles,
            service=executor.service,
        )
        return await executor.execute(requested)
    finally:
        if owned is not None:
            await owned.aclose()
