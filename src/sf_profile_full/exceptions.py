"""Exceptions for Profile retrieval and canonicalization"""  # noqa: D415


class ProfileRetrieveError(Exception):
    """Base exception for profile retrieval errors"""  # noqa: D415


class MetadataCallError(ProfileRetrieveError):
    """Raised when a remote Metadata API call fails.

    A failed call is fatal for the whole invocation; it is never retried and
    no partial results are salvaged from the affected batch.
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        """Initialize with the failed operation name (e.g. ``readMetadata``)."""
        self.operation = operation
        super().__init__(message)


class ProfileBuildError(ProfileRetrieveError):
    """Raised when a single retrieved record cannot be canonicalized"""  # noqa: D415

    def __init__(self, message: str, full_name: str | None = None) -> None:
        """Initialize with the identifier of the offending record, if known."""
        self.full_name = full_name
        super().__init__(message)


class ProfileXmlError(ProfileRetrieveError):
    """Raised when XML text cannot be parsed"""  # noqa: D415


class ProfileSelectionError(ProfileRetrieveError):
    """Raised when the set of profile names to retrieve cannot be resolved"""  # noqa: D415


class ProfileWriteError(ProfileRetrieveError):
    """Raised when a profile file cannot be written"""  # noqa: D415
