"""Runs a full retrieval and reconciles the outcome of every requested name.

The executor drives the batched retrieval, optionally cleans each rendered
profile, writes it in source format, and then accounts for every requested
name: retrieved names get a success or failure outcome, and names the org
did not return get a "not found" failure. Reconciliation uses the returned
``fullName`` values, never positions within a batch. A name requested more
times than the org returned it repeats its first outcome, so there is always
exactly one outcome per requested name.

A failed remote call is not an outcome; ``MetadataCallError`` aborts the run.
"""

from __future__ import annotations

from collections import Counter
import logging
from typing import TYPE_CHECKING

from sf_profile_full.config import FrozenConfig, resolve_frozen_config
from sf_profile_full.constants import NOT_FOUND_MESSAGE
from sf_profile_full.core.types import (
    ProfileOutcome,
    RetrievedProfile,
    RetrieveFullResult,
    Success,
)
from sf_profile_full.exceptions import ProfileRetrieveError
from sf_profile_full.files.writer import write_profile_to_source_format
from sf_profile_full.pipeline.cleaner import clean_profile_xml
from sf_profile_full.pipeline.retriever import ProfileMetadataService
from sf_profile_full.telemetry import TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sf_profile_full.pipeline.base import MetadataConnection
    from sf_profile_full.telemetry import TelemetryReporter

log = logging.getLogger(__name__)


class ProfileRetrieveExecutor:
    """Retrieves, cleans and writes profiles, one outcome per requested name."""

    def __init__(
        self,
        connection: MetadataConnection,
        config: FrozenConfig,
        *,
        telemetry_reporters: Iterable[TelemetryReporter] = (),
    ):
        """Initialize the executor.

        Args:
            connection: The remote metadata capability.
            config: Frozen configuration (batch size, output dir, cleaning).
            telemetry_reporters: Reporters for timings and counters; ignored
                unless telemetry is enabled.
        """
        self.config = config
        self._ctx = TelemetryContext(*telemetry_reporters)
        self.service = ProfileMetadataService(
            connection,
            batch_size=config.batch_size,
            telemetry=self._ctx,
        )

    async def execute(self, names: Sequence[str]) -> RetrieveFullResult:
        """Retrieve ``names`` and write each profile to the output directory.

        Raises:
            MetadataCallError: If a remote call fails.
        """
        requested = list(names)
        outcomes: list[ProfileOutcome] = []
        returned: Counter[str] = Counter()
        first_outcome: dict[str, ProfileOutcome] = {}

        with self._ctx("profiles.retrieve_full", requested=len(requested)):
            for result in await self.service.retrieve(requested):
                if isinstance(result, Success):
                    outcome = self._persist(result.value)
                else:
                    name = result.error.full_name or "<unknown>"
                    log.warning("Profile %s failed: %s", name, result.error)
                    outcome = ProfileOutcome.failed(name, str(result.error))
                returned[outcome.name] += 1
                first_outcome.setdefault(outcome.name, outcome)
                outcomes.append(outcome)

            for name in requested:
                if returned[name] > 0:
                    returned[name] -= 1
                elif name in first_outcome:
                    outcomes.append(first_outcome[name])
                else:
                    log.warning("Profile %s was not returned by the org", name)
                    self._ctx.count("profiles.not_found")
                    outcomes.append(ProfileOutcome.failed(name, NOT_FOUND_MESSAGE))

        result = RetrieveFullResult(
            profiles=tuple(outcomes),
            total_requested=len(requested),
            metadata={"output_dir": self.config.output_dir, "cleaned": self.config.clean},
        )
        log.info(
            "Retrieved %d profile(s): %d succeeded, %d failed",
            result.total_requested,
            result.total_success,
            result.total_failed,
        )
        return result

    def _persist(self, profile: RetrievedProfile) -> ProfileOutcome:
        try:
            xml = profile.xml
            if self.config.clean:
                xml = clean_profile_xml(xml, self.config.clean_options)
            path = write_profile_to_source_format(
                profile.full_name, xml, self.config.output_dir
            )
        except (OSError, ProfileRetrieveError) as e:
            log.warning("Profile %s could not be written: %s", profile.full_name, e)
            self._ctx.count("profiles.write_failed")
            return ProfileOutcome.failed(profile.full_name, str(e))
        return ProfileOutcome.succeeded(profile.full_name, path)


def create_executor(
    connection: MetadataConnection,
    config: FrozenConfig | None = None,
    *,
    telemetry_reporters: Iterable[TelemetryReporter] = (),
) -> ProfileRetrieveExecutor:
    """Create an executor, resolving configuration when none is given."""
    # This is the only place where ambient configuration is resolved.
    final_config = config if config is not None else resolve_frozen_config()
    return ProfileRetrieveExecutor(
        connection, final_config, telemetry_reporters=telemetry_reporters
    )
