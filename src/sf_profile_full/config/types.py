"""Core configuration data types.

This module defines the data structures used by the configuration system,
following the resolve-once, freeze-then-flow pattern.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

from sf_profile_full.core.types import CleanOptions

# --- Source Tracking Types ---

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER = (
    "instance_url",
    "access_token",
    "api_version",
    "timeout",
    "batch_size",
    "output_dir",
    "clean",
    "remove_login_ip_ranges",
    "remove_user_license",
    "remove_login_hours",
)

_SECRET_FIELDS = frozenset({"access_token"})


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing.

    Carries an origin map recording where each value came from.
    """

    instance_url: str | None
    access_token: str | None
    api_version: str
    timeout: float
    batch_size: int
    output_dir: str
    clean: bool
    remove_login_ip_ranges: bool
    remove_user_license: bool
    remove_login_hours: bool

    origin: SourceMap

    def __str__(self) -> str:
        """String representation with the access token redacted."""
        token_display = "[REDACTED]" if self.access_token else None
        return (
            f"ResolvedConfig(instance_url={self.instance_url!r}, "
            f"access_token={token_display!r}, api_version={self.api_version!r}, "
            f"output_dir={self.output_dir!r}, clean={self.clean!r}, "
            f"origin={dict(self.origin)!r})"
        )

    def __repr__(self) -> str:
        """Repr with the access token redacted."""
        return self.__str__()

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration used at run time."""
        values = self._asdict()
        values.pop("origin")
        return FrozenConfig(**values)

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Return a copy with programmatic overrides applied to known fields."""
        new_values = self._asdict()
        new_origin = dict(self.origin)
        for field, value in overrides.items():
            if field in FIELD_ORDER:
                new_values[field] = value
                new_origin[field] = "programmatic"
        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Report the origin of each field, with secrets redacted."""
        lines = []
        for field in FIELD_ORDER:
            if field not in self.origin:
                continue
            origin = self.origin[field]
            value = getattr(self, field)
            if field in _SECRET_FIELDS:
                display = f"{origin}:None" if value is None else f"{origin}:<redacted>"
            elif origin == "env":
                display = f"env:SF_PROFILE_{field.upper()}={value}"
            else:
                display = f"{origin}:{value}"
            lines.append(f"{field}: {display}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration handed to the executor and connection."""

    instance_url: str | None
    access_token: str | None
    api_version: str
    timeout: float
    batch_size: int
    output_dir: str
    clean: bool
    remove_login_ip_ranges: bool = True
    remove_user_license: bool = True
    remove_login_hours: bool = True

    @property
    def clean_options(self) -> CleanOptions:
        """The cleaning toggles as a ``CleanOptions`` value."""
        return CleanOptions(
            remove_login_ip_ranges=self.remove_login_ip_ranges,
            remove_user_license=self.remove_user_license,
            remove_login_hours=self.remove_login_hours,
        )

    def __str__(self) -> str:
        """String representation with the access token redacted."""
        token_display = "[REDACTED]" if self.access_token else None
        return (
            f"FrozenConfig(instance_url={self.instance_url!r}, "
            f"access_token={token_display!r}, api_version={self.api_version!r}, "
            f"batch_size={self.batch_size!r}, output_dir={self.output_dir!r}, "
            f"clean={self.clean!r})"
        )

    def __repr__(self) -> str:
        """Representation with the access token redacted."""
        return self.__str__()
