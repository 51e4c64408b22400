"""Core data types that flow through the retrieval pipeline.

This module defines the immutable data structures that represent a Profile
as it moves from a raw Metadata API record to a canonical document, to XML
text, and finally to a per-identifier outcome. Each stage produces a new
value rather than mutating the previous one.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from types import MappingProxyType
import typing

from sf_profile_full.constants import (
    LOGIN_HOURS_FIELD,
    LOGIN_IP_RANGES_FIELD,
    USER_LICENSE_FIELD,
)

# --- Minimal guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _require_name(value: object, field_name: str) -> None:
    _require(
        condition=isinstance(value, str),
        message="must be str",
        field_name=field_name,
        exc=TypeError,
    )
    _require(
        condition=typing.cast("str", value).strip() != "",
        message="cannot be empty string",
        field_name=field_name,
    )


# --- Result Monad ---
# Per-entry failures travel as values so that one bad record never aborts
# the remaining ones. Only whole-call failures raise.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful result in the pipeline."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failure in the pipeline, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

# --- Core Data Models ---


@dataclasses.dataclass(frozen=True, slots=True)
class ProfileDocument:
    """A canonical, single-rooted document tree for one record.

    ``tree`` maps the record type (e.g. ``"Profile"``) to the body mapping,
    whose first entry is the ``@xmlns`` attribute. The identifier is kept
    alongside the tree, never inside it.
    """

    full_name: str
    record_type: str
    tree: typing.Mapping[str, typing.Any]

    def __post_init__(self) -> None:
        """Validate identifier and root shape."""
        _require_name(self.full_name, "full_name")
        _require_name(self.record_type, "record_type")
        _require(
            condition=list(self.tree) == [self.record_type],
            message=f"must have the single root {self.record_type!r}",
            field_name="tree",
        )

    @property
    def body(self) -> typing.Mapping[str, typing.Any]:
        """The root element's contents (attributes and fields)."""
        return self.tree[self.record_type]


@dataclasses.dataclass(frozen=True, slots=True)
class RetrievedProfile:
    """A retrieved profile rendered to Metadata API XML."""

    full_name: str
    xml: str

    def __post_init__(self) -> None:
        """Validate RetrievedProfile invariants."""
        _require_name(self.full_name, "full_name")
        _require(
            condition=isinstance(self.xml, str),
            message="must be str",
            field_name="xml",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class CleanOptions:
    """Which non-portable top-level elements to strip during cleaning."""

    remove_login_ip_ranges: bool = True
    remove_user_license: bool = True
    remove_login_hours: bool = True

    def fields(self) -> tuple[str, ...]:
        """Return the element names enabled for removal, in a fixed order."""
        toggles = (
            (self.remove_login_ip_ranges, LOGIN_IP_RANGES_FIELD),
            (self.remove_user_license, USER_LICENSE_FIELD),
            (self.remove_login_hours, LOGIN_HOURS_FIELD),
        )
        return tuple(name for enabled, name in toggles if enabled)


DEFAULT_CLEAN_OPTIONS = CleanOptions()


@dataclasses.dataclass(frozen=True, slots=True)
class ProfileOutcome:
    """Outcome for a single requested profile."""

    name: str
    success: bool
    file_path: Path | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        """A success carries a path; a failure carries a reason."""
        if self.success:
            _require(
                condition=self.file_path is not None and self.error is None,
                message="successful outcome requires file_path and no error",
                field_name="success",
            )
        else:
            _require(
                condition=bool(self.error),
                message="failed outcome requires an error message",
                field_name="error",
            )

    @classmethod
    def succeeded(cls, name: str, file_path: Path) -> ProfileOutcome:
        """Build a success outcome."""
        return cls(name=name, success=True, file_path=file_path)

    @classmethod
    def failed(cls, name: str, error: str) -> ProfileOutcome:
        """Build a failure outcome."""
        return cls(name=name, success=False, error=error)

    def to_dict(self) -> dict[str, typing.Any]:
        """Plain representation for JSON output."""
        return {
            "name": self.name,
            "success": self.success,
            "filePath": str(self.file_path) if self.file_path else None,
            "error": self.error,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class RetrieveFullResult:
    """Aggregate result of a full retrieval run."""

    profiles: tuple[ProfileOutcome, ...]
    total_requested: int
    metadata: typing.Mapping[str, typing.Any] = dataclasses.field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        """Freeze metadata and validate counts."""
        _require(
            condition=isinstance(self.profiles, tuple),
            message="must be a tuple[ProfileOutcome, ...]",
            field_name="profiles",
            exc=TypeError,
        )
        _require(
            condition=self.total_requested >= 0,
            message="must be >= 0",
            field_name="total_requested",
        )
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def total_success(self) -> int:
        """Number of profiles retrieved and written."""
        return sum(1 for p in self.profiles if p.success)

    @property
    def total_failed(self) -> int:
        """Number of profiles that failed or were not found."""
        return sum(1 for p in self.profiles if not p.success)

    @property
    def ok(self) -> bool:
        """True when every outcome succeeded."""
        return self.total_failed == 0

    def to_dict(self) -> dict[str, typing.Any]:
        """Plain representation for JSON output."""
        return {
            "profiles": [p.to_dict() for p in self.profiles],
            "totalRequested": self.total_requested,
            "totalSuccess": self.total_success,
            "totalFailed": self.total_failed,
        }
