"""Public API for the configuration system."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .types import FrozenConfig, ResolvedConfig

# Global resolver instance for reuse
_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    org: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Programmatic > Environment > Project file > Home file > Defaults

    Args:
        programmatic: Overrides with the highest precedence. Only known
            fields are used.
        org: Named org section to load from configuration files. If None,
            uses ``SF_PROFILE_ORG`` when set.
        use_env_file: Optional .env file to read beneath the environment.
        project_root: Directory to search for pyproject.toml.

    Returns:
        ResolvedConfig with merged values and source tracking.

    Raises:
        ValueError: If validation fails or the org section is unknown.
        ConfigFileError: If a configuration file is malformed.

    Example:
        config = resolve_config({"output_dir": "profiles", "clean": True})
        frozen = config.to_frozen()
    """
    return _resolver.resolve(
        programmatic=programmatic,
        org=org,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def resolve_frozen_config(
    programmatic: dict[str, Any] | None = None, **kwargs: Any
) -> FrozenConfig:
    """Resolve and freeze in one step."""
    return resolve_config(programmatic, **kwargs).to_frozen()


def list_available_orgs(project_root: Path | None = None) -> dict[str, list[str]]:
    """List named org sections from the project and home files."""
    return _resolver.file_loader.list_available_orgs(project_root)
