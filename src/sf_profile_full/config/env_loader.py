"""Environment variable configuration loading.

Reads ``SF_PROFILE_*`` variables, optionally layered over a ``.env`` file,
and coerces them through the settings schema.
"""

import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from .schema import ProfileSettings
from .types import FIELD_ORDER

ENV_PREFIX = "SF_PROFILE_"
ENV_VARS = {f"{ENV_PREFIX}{field.upper()}": field for field in FIELD_ORDER}


class EnvironmentConfigLoader:
    """Loads configuration from ``SF_PROFILE_*`` environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Load configuration values that are actually set in the environment.

        Args:
            env_file: Optional ``.env`` file. Its values apply only where the
                real environment does not already define the variable.

        Returns:
            Dictionary of coerced values, only for variables that are set.

        Raises:
            FileNotFoundError: If ``env_file`` does not exist.
            ValueError: If a variable holds an invalid value.
        """
        environ: dict[str, str | None] = {}
        if env_file:
            env_path = Path(env_file)
            if not env_path.exists():
                raise FileNotFoundError(f"Environment file not found: {env_path}")
            environ.update(dotenv_values(env_path))
        environ.update(os.environ)

        env_values = {
            field: environ[var]
            for var, field in ENV_VARS.items()
            if environ.get(var) is not None
        }
        if not env_values:
            return {}

        try:
            settings = ProfileSettings(**env_values)
        except Exception as e:
            names = ", ".join(f"{ENV_PREFIX}{field.upper()}" for field in env_values)
            raise ValueError(f"Invalid environment variable values: {names}. Error: {e}") from e

        return {field: getattr(settings, field) for field in env_values}

    def get_env_summary(self) -> dict[str, str]:
        """Return the set ``SF_PROFILE_*`` variables with secrets redacted."""
        return {
            var: "<redacted>" if "TOKEN" in var else os.environ[var]
            for var in ENV_VARS
            if var in os.environ
        }
