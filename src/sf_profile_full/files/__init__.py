"""
Source-format file handling for retrieved profiles
"""  # noqa: D200, D212, D415

from .scanner import profile_names_from_directory
from .writer import source_file_name, write_profile_to_source_format

__all__ = [
    "profile_names_from_directory",
    "source_file_name",
    "write_profile_to_source_format",
]
