"""Version parsing, extraction and increment.

Two version families are supported:

- plain semver triples: ``1.2.3``
- triples with one numeric qualifier, either a build number (``1.2.3+7``)
  or a pre-release number (``1.2.3-4``)

Both share one :class:`Version` type; the qualifier kind is a tag on the
value rather than a subclass. Automatic increments always bump the minor
component, patch releases have to be set explicitly in the version file.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from release_paperwork.exceptions import BadPatternError, MalformedVersionError, VersionNotFoundError

if TYPE_CHECKING:
    from release_paperwork.core.ledger import ReleaseRecord

logger = logging.getLogger(__name__)

DEFAULT_VERSION_PATTERN = r"""version\s*=\s*['"]([^'"]+)"""

# Build number is tried first, so "1.0.0+1" never reads as a pre-release.
VERSION_REGEX = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:\+(?P<build>\d+)|-(?P<prerelease>\d+))?$"
)


class QualifierKind(StrEnum):
    """Kind of trailing version qualifier."""

    BUILD = "+"
    PRERELEASE = "-"


@dataclass(frozen=True, slots=True)
class Qualifier:
    """Numeric suffix attached to a version triple."""

    kind: QualifierKind
    number: int

    def __str__(self) -> str:
        return f"{self.kind.value}{self.number}"


@dataclass(frozen=True, slots=True)
class Version:
    """A ``major.minor.patch`` version with an optional qualifier.

    Attributes:
        major: Major component
        minor: Minor component
        patch: Patch component
        qualifier: Optional build or pre-release number
    """

    major: int
    minor: int
    patch: int
    qualifier: Qualifier | None = None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.qualifier is None:
            return base
        return f"{base}{self.qualifier}"

    def increment(self) -> Version:
        """Return the next automatic version.

        The minor component goes up by one and patch resets to zero. A
        build or pre-release number, when present, goes up by one as well.
        The major component is never touched.
        """
        qualifier = self.qualifier
        if qualifier is not None:
            qualifier = replace(qualifier, number=qualifier.number + 1)
        return Version(self.major, self.minor + 1, 0, qualifier)


def parse_version(text: str) -> Version:
    """Parse ``A.B.C``, ``A.B.C+N`` or ``A.B.C-N``.

    Args:
        text: Version string

    Returns:
        Parsed Version

    Raises:
        MalformedVersionError: If the text is not a supported version
    """
    match = VERSION_REGEX.match(text.strip())
    if not match:
        raise MalformedVersionError(
            f"Can't parse version '{text}'. Expected format 'major.minor.patch' "
            "optionally followed by '+<build>' or '-<prerelease>' (e.g. 1.2.0, 1.2.0+3, 1.2.0-1)"
        )

    qualifier = None
    if match.group("build") is not None:
        qualifier = Qualifier(QualifierKind.BUILD, int(match.group("build")))
    elif match.group("prerelease") is not None:
        qualifier = Qualifier(QualifierKind.PRERELEASE, int(match.group("prerelease")))

    return Version(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        qualifier=qualifier,
    )


def compile_version_pattern(pattern: str | re.Pattern[str] | None = None) -> re.Pattern[str]:
    """Compile a version extraction pattern.

    Patterns are compiled in multiline mode, so ``^`` and ``$`` anchor at
    line boundaries both when scanning line by line and when rewriting
    the whole file.

    Args:
        pattern: Regex with exactly one capturing group, or None for the default

    Returns:
        Compiled pattern

    Raises:
        BadPatternError: If the regex is invalid or doesn't have exactly one group
    """
    if isinstance(pattern, re.Pattern):
        compiled = pattern
    else:
        source = DEFAULT_VERSION_PATTERN if pattern is None else pattern
        try:
            compiled = re.compile(source, re.MULTILINE)
        except re.error as e:
            raise BadPatternError(f"Bad project version regex ({source}): {e}") from e

    if compiled.groups != 1:
        raise BadPatternError(
            f"Bad project version regex ({compiled.pattern}), it's expected to have "
            f"a single capturing group but has {compiled.groups}"
        )
    return compiled


def extract_version(
    content: str,
    pattern: str | re.Pattern[str] | None = None,
    *,
    source: str = "<content>",
) -> str:
    """Extract the version text from the first matching line.

    Args:
        content: Text of the version holding file
        pattern: Extraction regex with a single capturing group
        source: Name of the file, used in error messages

    Returns:
        The captured version text

    Raises:
        BadPatternError: If the pattern is unusable
        VersionNotFoundError: If no line matches
    """
    compiled = compile_version_pattern(pattern)
    for line in content.splitlines():
        match = compiled.search(line)
        if match:
            return match.group(1)

    raise VersionNotFoundError(
        f"Can't extract project version from file {source} using the following regex: {compiled.pattern}"
    )


def resolve_release_version(current_version: str, last_release: ReleaseRecord | None) -> str:
    """Decide which version to release.

    A current version that differs from the last released one was set by
    hand (a patch release or any other explicit bump) and is used verbatim.
    Otherwise the last released version is incremented.

    Args:
        current_version: Version text found in the version file
        last_release: Last release recorded in the release notes, if any

    Returns:
        Version text to release
    """
    if last_release is None:
        logger.info("No previously released version is found")
        return current_version

    if current_version != last_release.version:
        logger.info(
            "Current project version (%s) differs from the last released version (%s), "
            "assuming that version %s is set manually, using it for releasing",
            current_version,
            last_release.version,
            current_version,
        )
        return current_version

    return str(parse_version(last_release.version).increment())
