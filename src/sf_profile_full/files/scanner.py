"""
Discovery of profile names from an existing source directory
"""  # noqa: D200, D212, D415

import logging
from pathlib import Path

from ..constants import SOURCE_FILE_SUFFIX  # noqa: TID252
from ..exceptions import ProfileSelectionError  # noqa: TID252

log = logging.getLogger(__name__)


def profile_names_from_directory(directory: str | Path) -> list[str]:
    """Recursively collect profile names from ``*.profile-meta.xml`` files.

    Entries are visited in sorted order so the result is deterministic.

    Raises:
        ProfileSelectionError: If ``directory`` is not an existing directory.
    """
    root = Path(directory)
    if not root.is_dir():
        raise ProfileSelectionError(f"Path is not a directory: {root}")

    names: list[str] = []
    for entry in sorted(root.iterdir()):
        if entry.is_dir():
            names.extend(profile_names_from_directory(entry))
        elif entry.name.endswith(SOURCE_FILE_SUFFIX):
            names.append(entry.name[: -len(SOURCE_FILE_SUFFIX)])

    log.debug("Found %d profile file(s) under %s", len(names), root)
    return names
