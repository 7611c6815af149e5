"""Recovery of the last release from the release notes file.

The release notes file is the only durable record of previous releases.
Its topmost block looks like::

    ## v1.1.0 released on 21 Oct 2022 UTC
      * 6d1e0f3c... feature3
      * 41b0a2d9... feature2

Only the header and the first change line of that block are read; the
first change line names the newest commit already released, which is
where the next collection of changes stops.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_paperwork.exceptions import MalformedBulletLineError, MalformedReleaseHeaderError
from release_paperwork.fs import read_text

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

RELEASE_HEADER_PREFIX = "## v"
RELEASE_DESCRIPTION_FORMAT = "v<version> released on <date><additional-release-description>"
COMMIT_DESCRIPTION_FORMAT = "  * <commit-hash> <commit-description>"
BULLET_PREFIX_REGEX = re.compile(r"\s+\*\s+")


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    """The most recent release recorded in the release notes.

    Attributes:
        version: Released version text
        last_commit_sha: Hash of the newest commit included in that release
    """

    version: str
    last_commit_sha: str


def extract_release_version(line: str) -> str:
    """Extract the version from a ``## v<version> ...`` header line."""
    if not line.startswith(RELEASE_HEADER_PREFIX):
        raise MalformedReleaseHeaderError(
            f"Can't extract released version name from line '{line}' - it's expected to have format "
            f"'{RELEASE_DESCRIPTION_FORMAT}' but doesn't start from prefix '{RELEASE_HEADER_PREFIX}'"
        )

    match = re.search(r"\s", line[len(RELEASE_HEADER_PREFIX) :])
    if match is None:
        raise MalformedReleaseHeaderError(
            f"Can't extract released version name from line '{line}' - it's expected to have format "
            f"'{RELEASE_DESCRIPTION_FORMAT}' but doesn't have a white space"
        )
    if match.start() == 0:
        raise MalformedReleaseHeaderError(
            f"Can't extract released version name from line '{line}' - it's expected to have format "
            f"'{RELEASE_DESCRIPTION_FORMAT}' but doesn't have any symbols between 'v' and white space"
        )
    return line[len(RELEASE_HEADER_PREFIX) : len(RELEASE_HEADER_PREFIX) + match.start()]


def extract_commit_hash(line: str) -> str:
    """Extract the commit hash from a ``  * <hash> <description>`` line."""
    prefix = BULLET_PREFIX_REGEX.match(line)
    if prefix is None:
        raise MalformedBulletLineError(
            f"Can't extract commit hash from line '{line}' - it's expected to have format "
            f"'{COMMIT_DESCRIPTION_FORMAT}' but doesn't start from text matching regex "
            f"'{BULLET_PREFIX_REGEX.pattern}'"
        )

    remainder = line[prefix.end() :]
    if not remainder:
        raise MalformedBulletLineError(
            f"Can't extract commit hash from line '{line}' - it's expected to have format "
            f"'{COMMIT_DESCRIPTION_FORMAT}' and it starts from text matching regex "
            f"'{BULLET_PREFIX_REGEX.pattern}' but there is no text after it"
        )

    space = re.search(r"\s", remainder)
    if space is None:
        raise MalformedBulletLineError(
            f"Can't extract commit hash from line '{line}' - it's expected to have format "
            f"'{COMMIT_DESCRIPTION_FORMAT}' and it starts from text matching regex "
            f"'{BULLET_PREFIX_REGEX.pattern}' but there is no white space in the remainder line "
            f"('{remainder}')"
        )
    return remainder[: space.start()]


def parse_release_record(content: str, source: str = "<release notes>") -> ReleaseRecord | None:
    """Parse the topmost release block of release notes content.

    Args:
        content: Release notes text
        source: Name of the file, used in log messages

    Returns:
        The recovered record, or None if the content holds no release

    Raises:
        MalformedReleaseHeaderError: If the first non-blank line isn't a release header
        MalformedBulletLineError: If the next non-blank line isn't a change line
    """
    version: str | None = None
    for line in content.splitlines():
        if not line.strip():
            continue
        if version is None:
            version = extract_release_version(line)
            continue
        return ReleaseRecord(version=version, last_commit_sha=extract_commit_hash(line))

    logger.info("No information about the last released version is extracted from %s", source)
    return None


def read_release_record(path: Path) -> ReleaseRecord | None:
    """Read the last release from a release notes file.

    Args:
        path: Release notes file

    Returns:
        The recovered record, or None if the file doesn't exist or holds no release
    """
    if not path.is_file():
        return None
    return parse_release_record(read_text(path), source=str(path))
