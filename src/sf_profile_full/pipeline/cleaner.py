"""Stripping of non-portable elements from Profile XML.

Some top-level Profile elements (login IP ranges, the user license, login
hours) are specific to one org and break deployments between sandboxes and
production. Cleaning removes them whole; nested content is never touched.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging

from sf_profile_full.constants import PROFILE_RECORD_TYPE
from sf_profile_full.core.types import DEFAULT_CLEAN_OPTIONS, CleanOptions
from sf_profile_full.exceptions import ProfileXmlError
from sf_profile_full.pipeline.xml_codec import parse_xml, to_xml

log = logging.getLogger(__name__)

__all__ = ["clean_profile_xml"]


def clean_profile_xml(
    xml: str,
    options: CleanOptions = DEFAULT_CLEAN_OPTIONS,
    *,
    record_type: str = PROFILE_RECORD_TYPE,
) -> str:
    """Clean a Profile XML string by removing non-portable elements.

    Args:
        xml: The Profile XML text.
        options: Which elements to remove (defaults to all non-portable ones).
        record_type: Expected root element name.

    Returns:
        The cleaned XML. Text without a ``record_type`` root element is
        returned unchanged.
    """
    try:
        parsed = parse_xml(xml)
    except ProfileXmlError as e:
        log.warning("Not cleaning unparseable document: %s", e)
        return xml

    body = parsed.get(record_type)
    if not isinstance(body, Mapping):
        log.debug("No <%s> root element found; leaving document unchanged", record_type)
        return xml

    cleaned = dict(body)
    for field in options.fields():
        if cleaned.pop(field, None) is not None:
            log.debug("Removed <%s> from %s", field, record_type)

    return to_xml({record_type: cleaned})
