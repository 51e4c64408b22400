"""Retrieval and canonicalization stages for Profile metadata."""

from .base import MetadataConnection
from .cleaner import clean_profile_xml
from .document import build_profile_document, get_full_name
from .normalizer import TRANSPORT_KEYS, strip_transport_keys
from .retriever import ProfileMetadataService, as_record_list, chunked
from .xml_codec import parse_xml, to_xml

__all__ = [
    "TRANSPORT_KEYS",
    "MetadataConnection",
    "ProfileMetadataService",
    "as_record_list",
    "build_profile_document",
    "chunked",
    "clean_profile_xml",
    "get_full_name",
    "parse_xml",
    "strip_transport_keys",
    "to_xml",
]
