"""Removal of API-client transport keys from loosely-typed metadata records.

The SOAP client decorates decoded records with a ``"$"`` key holding XML
attributes (``xsi:type`` and friends) and a ``"type"`` key carrying the wire
type. Neither belongs to the record's own content model, and either may
appear at any depth, including inside list elements.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sf_profile_full.constants import TRANSPORT_KEYS

__all__ = ["TRANSPORT_KEYS", "strip_transport_keys"]


def strip_transport_keys(node: Any) -> Any:
    """Return a copy of ``node`` with every transport key removed.

    Dispatches on the three node shapes: mappings are rebuilt without the
    reserved keys, lists and tuples are rebuilt element-wise, and anything
    else is returned as-is. The input is never mutated.
    """
    if isinstance(node, Mapping):
        return {
            key: strip_transport_keys(value)
            for key, value in node.items()
            if key not in TRANSPORT_KEYS
        }
    if isinstance(node, list | tuple):
        return [strip_transport_keys(item) for item in node]
    return node
