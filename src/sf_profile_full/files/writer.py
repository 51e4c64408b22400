"""
Writing Profile XML to disk in Salesforce DX source format
"""  # noqa: D200, D212, D415

import logging
from pathlib import Path

from ..constants import SOURCE_FILE_SUFFIX  # noqa: TID252
from ..exceptions import ProfileWriteError  # noqa: TID252

log = logging.getLogger(__name__)


def source_file_name(profile_name: str) -> str:
    """Return the source-format file name for a profile"""  # noqa: D415
    return f"{profile_name}{SOURCE_FILE_SUFFIX}"


def write_profile_to_source_format(
    profile_name: str, xml: str, output_dir: str | Path
) -> Path:
    """Write a Profile XML string to ``<output_dir>/<name>.profile-meta.xml``.

    Creates ``output_dir`` and any missing parents, and overwrites an
    existing file of the same name.

    Returns:
        The path of the written file.

    Raises:
        ProfileWriteError: If the directory or file cannot be written.
    """
    if not profile_name or "/" in profile_name or "\\" in profile_name:
        raise ProfileWriteError(f"Invalid profile name for a file: {profile_name!r}")

    directory = Path(output_dir)
    file_path = directory / source_file_name(profile_name)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        file_path.write_text(xml, encoding="utf-8")
    except OSError as e:
        raise ProfileWriteError(f"Failed to write {file_path}: {e}") from e

    log.debug("Wrote %s", file_path)
    return file_path
