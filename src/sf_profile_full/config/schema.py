"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces
configuration values from the environment, TOML files and programmatic
overrides into the correct types with proper defaults.
"""

import re
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sf_profile_full.constants import (
    BATCH_SIZE,
    DEFAULT_API_VERSION,
    DEFAULT_OUTPUT_DIR,
    NETWORK_TIMEOUT,
)

_API_VERSION_RE = re.compile(r"^\d{2,3}\.0$")


class ProfileSettings(BaseSettings):
    """Pydantic settings schema for profile retrieval.

    Integrates with environment variables using the ``SF_PROFILE_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="SF_PROFILE_",
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Connection ---

    instance_url: str | None = Field(
        default=None,
        description="Org instance URL, e.g. https://example.my.salesforce.com",
    )

    access_token: str | None = Field(
        default=None,
        description="Session id / OAuth access token for the org",
    )

    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        description="Metadata API version",
    )

    timeout: float = Field(
        default=NETWORK_TIMEOUT,
        description="HTTP timeout in seconds",
        gt=0,
    )

    batch_size: int = Field(
        default=BATCH_SIZE,
        description="Full names per readMetadata call",
        ge=1,
        le=BATCH_SIZE,
    )

    # --- Output ---

    output_dir: str = Field(
        default=DEFAULT_OUTPUT_DIR,
        description="Directory for .profile-meta.xml files",
        min_length=1,
    )

    clean: bool = Field(
        default=False,
        description="Strip non-portable elements before writing",
    )

    remove_login_ip_ranges: bool = Field(default=True)
    remove_user_license: bool = Field(default=True)
    remove_login_hours: bool = Field(default=True)

    # --- Validation Rules ---

    @field_validator("instance_url", mode="before")
    @classmethod
    def normalize_instance_url(cls, v: Any) -> Any:
        """Strip whitespace and trailing slashes; require http(s)."""
        if v is None:
            return v
        if not isinstance(v, str):
            raise ValueError("instance_url must be a string")
        url = v.strip().rstrip("/")
        if not url:
            return None
        if not url.startswith(("https://", "http://")):
            raise ValueError(f"instance_url must start with https://, got {v!r}")
        return url

    @field_validator("api_version", mode="before")
    @classmethod
    def parse_api_version(cls, v: Any) -> str:
        """Accept ``62``, ``62.0``, ``"v62.0"``."""
        text = str(v).strip().lstrip("vV")
        if text.isdigit():
            text = f"{text}.0"
        if not _API_VERSION_RE.match(text):
            raise ValueError(f"Invalid api_version: {v!r}. Expected e.g. '62.0'")
        return text

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        """Field defaults, without reading the environment."""
        return {name: field.default for name, field in cls.model_fields.items()}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary of resolved values."""
        return {name: getattr(self, name) for name in type(self).model_fields}
