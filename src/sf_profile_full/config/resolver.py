"""Configuration resolution with precedence handling.

Precedence, highest first:
Programmatic > Environment > Project file > Home file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

from .audit import SourceTracker
from .env_loader import EnvironmentConfigLoader
from .file_loader import FileConfigLoader
from .schema import ProfileSettings
from .types import ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Merges configuration from every source in precedence order."""

    def __init__(self) -> None:
        """Initialize the configuration resolver."""
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        org: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources.

        Args:
            programmatic: Overrides with the highest precedence.
            org: Named org section to load from files; defaults to
                ``SF_PROFILE_ORG`` when unset.
            use_env_file: Optional .env file layered under the environment.
            project_root: Directory to search for pyproject.toml.

        Returns:
            ResolvedConfig with merged values and source tracking.

        Raises:
            ValueError: If validation fails or the org is in neither file.
            ConfigFileError: If a configuration file is malformed.
        """
        tracker = SourceTracker()
        merged: dict[str, Any] = {}

        if org is None:
            org = os.getenv("SF_PROFILE_ORG") or None

        def apply(values: dict[str, Any], origin: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged:  # Only known fields
                    merged[field] = value
                    tracker.set_origin(field, origin)
                else:
                    log.debug("Ignoring unknown config field %r from %s", field, origin)

        for field, value in ProfileSettings.defaults().items():
            merged[field] = value
            tracker.set_origin(field, "default")

        if org:
            # A named org only has to exist in one of the two files
            available = self.file_loader.list_available_orgs(project_root)
            if org not in available["home"] and org not in available["project"]:
                raise ValueError(f"Org '{org}' not found in any configuration file")
            if org in available["home"]:
                apply(self.file_loader.load_home_config(org=org), "file")
            if org in available["project"]:
                apply(
                    self.file_loader.load_project_config(
                        project_root=project_root, org=org
                    ),
                    "file",
                )
        else:
            apply(self.file_loader.load_home_config(), "file")
            apply(self.file_loader.load_project_config(project_root=project_root), "file")

        try:
            apply(self.env_loader.load_env_config(env_file=use_env_file), "env")
        except (ValueError, FileNotFoundError) as e:
            raise ValueError(f"Environment configuration error: {e}") from e

        if programmatic:
            apply(programmatic, "programmatic")

        try:
            final = ProfileSettings(**merged).to_dict()
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        return ResolvedConfig(**final, origin=tracker.get_source_map())
