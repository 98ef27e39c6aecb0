"""
Utilities package for cloud-client-setup.

Pure helpers for line-oriented system files and directory checks, plus the
host-specific override file lookup.
"""

from .file_operations import (
    contains_literal,
    directory_has_content,
    find_line_with_prefix,
    line_to_append,
    path_is_occupied,
)

__all__ = [
    "contains_literal",
    "directory_has_content",
    "find_line_with_prefix",
    "line_to_append",
    "path_is_occupied",
]
