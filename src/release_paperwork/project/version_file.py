"""Reading and updating the version in a project file.

The version lives in an arbitrary text file (``build.gradle``,
``pyproject.toml``, ``pubspec.yaml``, a source constant, ...). A regex
with one capturing group locates it. Updates replace the old version
text literally inside the first match only, so quoting, formatting and
every other occurrence of the same text elsewhere in the file stay as
they are.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from release_paperwork.core.version import compile_version_pattern, extract_version
from release_paperwork.exceptions import PatternNotFoundError, VersionFileNotFoundError
from release_paperwork.fs import read_text

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_VERSION_FILES = ("build.gradle", "build.gradle.kts", "pyproject.toml")


def find_version_file(project_path: Path, configured: Path | str | None = None) -> Path:
    """Locate the file holding the project version.

    Args:
        project_path: Project root directory
        configured: Explicit version file, relative to the project root

    Returns:
        Path to the version file

    Raises:
        VersionFileNotFoundError: If the configured file or every default candidate is missing
    """
    if configured is not None:
        path = project_path / configured
        if not path.is_file():
            raise VersionFileNotFoundError(f"Project version file doesn't exist ({configured})")
        return path

    for name in DEFAULT_VERSION_FILES:
        candidate = project_path / name
        if candidate.is_file():
            return candidate

    raise VersionFileNotFoundError(
        f"Can't extract project version - none of {', '.join(DEFAULT_VERSION_FILES)} "
        f"are found in {project_path}"
    )


def get_current_version(path: Path, pattern: str | re.Pattern[str] | None = None) -> str:
    """Read the version text from a version file.

    Raises:
        VersionFileNotFoundError: If the file doesn't exist
        VersionNotFoundError: If no line matches the pattern
    """
    if not path.is_file():
        raise VersionFileNotFoundError(f"Project version file doesn't exist ({path})")
    return extract_version(read_text(path), pattern, source=str(path))


def rewrite_version(
    content: str,
    pattern: str | re.Pattern[str] | None,
    old_version: str,
    new_version: str,
    *,
    source: str = "<content>",
) -> str:
    """Replace the version inside the first match of ``pattern``.

    Lines are matched one at a time without their line endings, the same
    way :func:`~release_paperwork.core.version.extract_version` reads them,
    so a line that yields the current version is also the line rewritten.

    Args:
        content: Current file content
        pattern: Extraction regex with a single capturing group
        old_version: Version text currently in the file
        new_version: Version text to write
        source: Name of the file, used in error messages

    Returns:
        Content with the matched span updated and everything else untouched

    Raises:
        PatternNotFoundError: If no line matches or the match doesn't hold ``old_version``
    """
    compiled = compile_version_pattern(pattern)
    offset = 0
    for line, text in zip(content.splitlines(keepends=True), content.splitlines(), strict=True):
        match = compiled.search(text)
        if match is None:
            offset += len(line)
            continue

        start, end = offset + match.start(), offset + match.end()
        region = content[start:end]
        if old_version not in region:
            raise PatternNotFoundError(
                f"Can't apply new version ({new_version}) to file {source} - the match of regex "
                f"{compiled.pattern} doesn't contain version {old_version}"
            )
        return content[:start] + region.replace(old_version, new_version) + content[end:]

    raise PatternNotFoundError(
        f"Can't apply new version ({new_version}) to file {source} - can't find version "
        f"there using regex {compiled.pattern}"
    )


def render_version_file(
    path: Path,
    pattern: str | re.Pattern[str] | None,
    old_version: str,
    new_version: str,
) -> str:
    """Return the content of ``path`` with the version rewritten.

    Nothing is written; the caller replaces the file once every other
    release computation has succeeded.

    Raises:
        VersionFileNotFoundError: If the file doesn't exist
        PatternNotFoundError: If the version can't be located for rewriting
    """
    if not path.is_file():
        raise VersionFileNotFoundError(f"Project version file doesn't exist ({path})")
    return rewrite_version(read_text(path), pattern, old_version, new_version, source=str(path))
