"""Source tracking for configuration resolution."""

from .types import ConfigOrigin, SourceMap


class SourceTracker:
    """Tracks the origin of configuration values during resolution."""

    def __init__(self) -> None:
        """Initialize an empty source tracker."""
        self._origins: dict[str, ConfigOrigin] = {}

    def set_origin(self, field: str, origin: ConfigOrigin) -> None:
        """Record the origin of a configuration field."""
        self._origins[field] = origin

    def get_source_map(self) -> SourceMap:
        """Return a copy of the recorded origins."""
        return dict(self._origins)
