"""Deterministic XML rendering of canonical document trees, and its inverse.

Tree conventions (shared by ``to_xml`` and ``parse_xml``):

- A document is a mapping with exactly one key, the root element name.
- Keys starting with ``@`` are attributes of the enclosing element.
- The ``#text`` key holds text of an element that also has attributes or
  children.
- A list value becomes one sibling element per entry, all with the same tag.
- Booleans render as ``true``/``false``; ``None`` renders as an empty element.
  Empty elements are always written out in full (``<tag></tag>``).
"""

from __future__ import annotations

from collections.abc import Mapping
import re
from typing import Any
import xml.etree.ElementTree as ET

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET

from sf_profile_full.constants import (
    ATTRIBUTE_PREFIX,
    TEXT_KEY,
    XML_DECLARATION,
    XML_INDENT,
)
from sf_profile_full.exceptions import ProfileXmlError

__all__ = ["parse_xml", "to_xml"]

# XML NameStartChar / NameChar without the colon; tags are always unprefixed.
_NAME_START = (
    r"A-Z_a-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    r"\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF"
    r"\uFDF0-\uFFFD\U00010000-\U000EFFFF"
)
_NAME_CHAR = _NAME_START + r"\-.0-9\u00B7\u0300-\u036F\u203F-\u2040"
_ELEMENT_NAME = re.compile(f"[{_NAME_START}][{_NAME_CHAR}]*")


def to_xml(tree: Mapping[str, Any]) -> str:
    """Render a single-rooted tree as indented XML with a leading declaration.

    Raises:
        ProfileXmlError: If the tree does not have exactly one root, or a tag
            is not a valid unprefixed XML name.
    """
    if not isinstance(tree, Mapping) or len(tree) != 1:
        raise ProfileXmlError("Document tree must have exactly one root element")

    ((root_tag, content),) = tree.items()
    if isinstance(content, list | tuple):
        raise ProfileXmlError(f"Root element {root_tag!r} cannot be a sequence")

    root = ET.Element(_tag(root_tag))
    _fill(root, content)
    ET.indent(root, space=XML_INDENT)
    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return XML_DECLARATION + body + "\n"


def _tag(name: Any) -> str:
    if not isinstance(name, str) or not _ELEMENT_NAME.fullmatch(name):
        raise ProfileXmlError(f"Invalid element name: {name!r}")
    return name


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _fill(element: ET.Element, value: Any) -> None:
    if not isinstance(value, Mapping):
        element.text = _text(value)
        return

    for key, child_value in value.items():
        if isinstance(key, str) and key.startswith(ATTRIBUTE_PREFIX):
            element.set(key[len(ATTRIBUTE_PREFIX) :], _text(child_value))
        elif key == TEXT_KEY:
            element.text = _text(child_value)
        else:
            _append(element, key, child_value)

    if element.text is None and len(element) == 0:
        element.text = ""


def _append(parent: ET.Element, tag: Any, value: Any) -> None:
    if isinstance(value, list | tuple):
        for item in value:
            _append(parent, tag, item)
        return
    child = ET.SubElement(parent, _tag(tag))
    _fill(child, value)


# --- Parsing ---


def parse_xml(text: str) -> dict[str, Any]:
    """Parse XML text into the tree convention used by ``to_xml``.

    Namespace URIs are folded back into ``@xmlns`` attributes wherever the
    namespace changes, repeated child tags become lists, and leaf text is
    trimmed but otherwise kept as a string.

    Raises:
        ProfileXmlError: If the text is not well-formed or uses forbidden
            constructs (entity declarations, external references).
    """
    try:
        root = SafeET.fromstring(text)
    except (SafeET.ParseError, DefusedXmlException) as e:
        raise ProfileXmlError(f"Invalid XML: {e}") from e

    tag, _ = _split_tag(root.tag)
    return {tag: _element_value(root, parent_namespace=None)}


def _split_tag(tag: str) -> tuple[str, str | None]:
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return local, namespace
    return tag, None


def _element_value(element: ET.Element, parent_namespace: str | None) -> Any:
    _, namespace = _split_tag(element.tag)
    result: dict[str, Any] = {}
    if namespace and namespace != parent_namespace:
        result[f"{ATTRIBUTE_PREFIX}xmlns"] = namespace
    for name, value in element.attrib.items():
        result[f"{ATTRIBUTE_PREFIX}{name}"] = value

    for child in element:
        child_tag, _ = _split_tag(child.tag)
        child_value = _element_value(child, namespace)
        existing = result.get(child_tag)
        if child_tag not in result:
            result[child_tag] = child_value
        elif isinstance(existing, list):
            existing.append(child_value)
        else:
            result[child_tag] = [existing, child_value]

    text = (element.text or "").strip()
    if not result:
        return text
    if text:
        result[TEXT_KEY] = text
    return result
