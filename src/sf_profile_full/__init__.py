"""Full Profile retrieval through the Salesforce Metadata API."""

import importlib.metadata
import logging

from sf_profile_full.adapters.soap import SoapMetadataConnection
from sf_profile_full.config import FrozenConfig, resolve_config, resolve_frozen_config
from sf_profile_full.core.types import (
    DEFAULT_CLEAN_OPTIONS,
    CleanOptions,
    Failure,
    ProfileDocument,
    ProfileOutcome,
    Result,
    RetrievedProfile,
    RetrieveFullResult,
    Success,
)
from sf_profile_full.exceptions import (
    MetadataCallError,
    ProfileBuildError,
    ProfileRetrieveError,
    ProfileSelectionError,
    ProfileWriteError,
    ProfileXmlError,
)
from sf_profile_full.executor import ProfileRetrieveExecutor, create_executor
from sf_profile_full.files import (
    profile_names_from_directory,
    write_profile_to_source_format,
)
from sf_profile_full.frontdoor import resolve_profile_names, retrieve_full
from sf_profile_full.pipeline import (
    MetadataConnection,
    ProfileMetadataService,
    build_profile_document,
    clean_profile_xml,
    parse_xml,
    strip_transport_keys,
    to_xml,
)
from sf_profile_full.telemetry import TelemetryContext, TelemetryReporter

# Version handling
try:
    __version__ = importlib.metadata.version("sf-profile-full")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Entry points
    "retrieve_full",
    "resolve_profile_names",
    "ProfileRetrieveExecutor",
    "create_executor",
    # Pipeline stages
    "MetadataConnection",
    "ProfileMetadataService",
    "SoapMetadataConnection",
    "strip_transport_keys",
    "build_profile_document",
    "to_xml",
    "parse_xml",
    "clean_profile_xml",
    "write_profile_to_source_format",
    "profile_names_from_directory",
    # Configuration
    "FrozenConfig",
    "resolve_config",
    "resolve_frozen_config",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
    # Core Types
    "CleanOptions",
    "DEFAULT_CLEAN_OPTIONS",
    "ProfileDocument",
    "RetrievedProfile",
    "ProfileOutcome",
    "RetrieveFullResult",
    "Result",
    "Success",
    "Failure",
    # Exceptions
    "ProfileRetrieveError",
    "MetadataCallError",
    "ProfileBuildError",
    "ProfileXmlError",
    "ProfileSelectionError",
    "ProfileWriteError",
]
