"""File-based configuration loading with named org sections.

Configuration can live in the project's ``pyproject.toml`` under
``[tool.sf_profile_full]`` or in ``~/.config/sf_profile_full.toml``. Either
file may hold named sections (``[tool.sf_profile_full.orgs.<name>]`` and
``[orgs.<name>]`` respectively) selected with ``org=``.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

_TOOL_KEY = "sf_profile_full"
_ORGS_KEY = "orgs"


class ConfigFileError(Exception):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause."""
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class FileConfigLoader:
    """Loads configuration from TOML files with org section support."""

    def load_project_config(
        self, project_root: Path | None = None, org: str | None = None
    ) -> dict[str, Any]:
        """Load configuration from the project's ``pyproject.toml``.

        Args:
            project_root: Directory to search for pyproject.toml. If None,
                searches the current directory and its parents.
            org: Optional org section to load instead of the base table.

        Returns:
            Configuration values; empty if there is no file or no table.

        Raises:
            ConfigFileError: If the file cannot be parsed or ``org`` is unknown.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if not pyproject_path:
            return {}

        data = self._read_toml(pyproject_path)
        section = data.get("tool", {}).get(_TOOL_KEY, {})
        if not section:
            return {}
        return self._select(section, org, pyproject_path)

    def load_home_config(self, org: str | None = None) -> dict[str, Any]:
        """Load configuration from the home configuration file.

        Raises:
            ConfigFileError: If the file cannot be parsed or ``org`` is unknown.
        """
        home_config_path = self._get_home_config_path()
        if not home_config_path.exists():
            return {}
        return self._select(self._read_toml(home_config_path), org, home_config_path)

    def list_available_orgs(self, project_root: Path | None = None) -> dict[str, list[str]]:
        """List org section names from the project and home files."""
        orgs: dict[str, list[str]] = {"project": [], "home": []}

        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path:
            try:
                section = self._read_toml(pyproject_path).get("tool", {}).get(_TOOL_KEY, {})
                orgs["project"] = list(section.get(_ORGS_KEY, {}))
            except ConfigFileError:
                pass

        home_config_path = self._get_home_config_path()
        if home_config_path.exists():
            try:
                orgs["home"] = list(self._read_toml(home_config_path).get(_ORGS_KEY, {}))
            except ConfigFileError:
                pass

        return orgs

    def _read_toml(self, path: Path) -> dict[str, Any]:
        try:
            with Path(path).open(mode="rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

    def _select(
        self, section: dict[str, Any], org: str | None, path: Path
    ) -> dict[str, Any]:
        if org:
            orgs = section.get(_ORGS_KEY, {})
            if org not in orgs:
                raise ConfigFileError(
                    path, f"Org '{org}' not found. Available orgs: {list(orgs)}"
                )
            return dict(orgs[org])
        config = dict(section)
        config.pop(_ORGS_KEY, None)
        return config

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Find pyproject.toml, honouring ``SF_PROFILE_PYPROJECT_PATH`` first."""
        override = os.getenv("SF_PROFILE_PYPROJECT_PATH")
        if override:
            path = Path(override)
            return path if path.exists() else None

        current = Path(start_dir or Path.cwd()).resolve()
        while current != current.parent:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            current = current.parent
        return None

    def _get_home_config_path(self) -> Path:
        """Return ``SF_PROFILE_CONFIG_HOME`` or ``~/.config/sf_profile_full.toml``."""
        override = os.getenv("SF_PROFILE_CONFIG_HOME")
        if override:
            return Path(override)
        return Path.home() / ".config" / "sf_profile_full.toml"
