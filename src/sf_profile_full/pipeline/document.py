"""Canonical document construction for retrieved metadata records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sf_profile_full.constants import (
    ATTRIBUTE_PREFIX,
    FULL_NAME_FIELD,
    METADATA_NAMESPACE,
    PROFILE_RECORD_TYPE,
)
from sf_profile_full.core.types import Failure, ProfileDocument, Result, Success
from sf_profile_full.exceptions import ProfileBuildError
from sf_profile_full.pipeline.normalizer import strip_transport_keys

__all__ = ["build_profile_document", "get_full_name"]


def get_full_name(record: Any) -> str | None:
    """Return the record's ``fullName`` when present as a non-empty string.

    Absent records, non-mapping records, and missing, blank or non-string
    names all yield ``None``; nothing is coerced.
    """
    if not isinstance(record, Mapping):
        return None
    value = record.get(FULL_NAME_FIELD)
    if isinstance(value, str) and value.strip():
        return value
    return None


def build_profile_document(
    record: Any,
    *,
    record_type: str = PROFILE_RECORD_TYPE,
    namespace: str = METADATA_NAMESPACE,
) -> Result[ProfileDocument, ProfileBuildError]:
    """Wrap a raw record in a namespaced, identifier-free document tree.

    Args:
        record: A raw record as returned by ``readMetadata``.
        record_type: Root element name of the document.
        namespace: Value of the root ``xmlns`` attribute.

    Returns:
        ``Success`` with the document, or ``Failure`` when the record has no
        usable ``fullName``.
    """
    full_name = get_full_name(record)
    if full_name is None:
        return Failure(ProfileBuildError(f"{record_type} record has no {FULL_NAME_FIELD}"))

    normalized = strip_transport_keys(record)
    body: dict[str, Any] = {f"{ATTRIBUTE_PREFIX}xmlns": namespace}
    for key, value in normalized.items():
        if key == FULL_NAME_FIELD:
            continue
        body[key] = value

    return Success(
        ProfileDocument(
            full_name=full_name,
            record_type=record_type,
            tree={record_type: body},
        )
    )
