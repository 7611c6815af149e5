"""Project file handling: locating and rewriting the version file."""

from __future__ import annotations

from release_paperwork.project.version_file import (
    find_version_file,
    get_current_version,
    render_version_file,
    rewrite_version,
)

__all__ = [
    "find_version_file",
    "get_current_version",
    "render_version_file",
    "rewrite_version",
]
