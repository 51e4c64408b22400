"""
Project-wide constants for Profile retrieval
"""  # noqa: D200, D212, D415

# ==============================================================================
# Metadata API
# ==============================================================================

# readMetadata() accepts at most this many full names per call
BATCH_SIZE = 10

PROFILE_RECORD_TYPE = "Profile"
METADATA_NAMESPACE = "http://soap.sforce.com/2006/04/metadata"
DEFAULT_API_VERSION = "62.0"
NETWORK_TIMEOUT = 30.0  # seconds

# Identifying field of every metadata record; never part of the document body
FULL_NAME_FIELD = "fullName"

# Keys injected by the API client to carry SOAP wire typing
TRANSPORT_KEYS = frozenset({"$", "type"})

# ==============================================================================
# XML rendering
# ==============================================================================

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
XML_INDENT = "    "
ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"

# ==============================================================================
# Source format
# ==============================================================================

SOURCE_FILE_SUFFIX = ".profile-meta.xml"
DEFAULT_OUTPUT_DIR = "force-app/main/default/profiles"

# Non-portable top-level Profile elements removed by cleaning
LOGIN_IP_RANGES_FIELD = "loginIpRanges"
USER_LICENSE_FIELD = "userLicense"
LOGIN_HOURS_FIELD = "loginHours"

NOT_FOUND_MESSAGE = "Profile not found in org or not returned by readMetadata()"
