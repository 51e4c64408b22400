"""Configuration management for profile retrieval.

Resolve-once, freeze-then-flow:
- ResolvedConfig: merged configuration with origin metadata
- FrozenConfig: immutable configuration used at run time
- SourceMap: where each value came from
"""

from .api import list_available_orgs, resolve_config, resolve_frozen_config
from .audit import SourceTracker
from .env_loader import EnvironmentConfigLoader
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import ProfileSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [
    "ConfigFileError",
    "ConfigOrigin",
    "ConfigResolver",
    "EnvironmentConfigLoader",
    "FileConfigLoader",
    "FrozenConfig",
    "ProfileSettings",
    "ResolvedConfig",
    "SourceMap",
    "SourceTracker",
    "list_available_orgs",
    "resolve_config",
    "resolve_frozen_config",
]
