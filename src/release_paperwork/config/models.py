"""Configuration models for release-paperwork.

Configuration is read from ``[tool.release-paperwork]`` in pyproject.toml
and validated by pydantic. Every option has a default, so a project
without any configuration works out of the box.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from release_paperwork.core.commits import DEFAULT_MAX_CHANGES_PER_RELEASE, RELEASE_COMMIT_MESSAGE_PATTERN
from release_paperwork.core.version import DEFAULT_VERSION_PATTERN

DEFAULT_RELEASE_NOTES_FILE = "RELEASE_NOTES.md"


class ReleasePaperworkConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    release_notes_file: Path = Field(
        default=Path(DEFAULT_RELEASE_NOTES_FILE),
        description="Release notes document, relative to the project root",
    )
    version_file: Path | None = Field(
        default=None,
        description="File holding the project version; first of build.gradle, "
        "build.gradle.kts, pyproject.toml when unset",
    )
    version_pattern: str = Field(
        default=DEFAULT_VERSION_PATTERN,
        description="Regex with a single capturing group locating the version",
    )
    additional_description: str = Field(
        default="",
        description="Text appended to every release header",
    )
    change_description: str | None = Field(
        default=None,
        description="'module:attribute' reference to a callable mapping a commit "
        "message to a change description, or None to drop the commit",
    )
    exclude_patterns: list[str] = Field(
        default_factory=list,
        description="Commits whose message matches any of these regexes are left out",
    )
    strip_patterns: list[str] = Field(
        default_factory=list,
        description="Regexes removed from commit messages",
    )
    max_changes_per_release: int = Field(
        default=DEFAULT_MAX_CHANGES_PER_RELEASE,
        description="Cap on listed changes per release; non-positive means unlimited",
    )
    tag_pattern: str = Field(
        default=RELEASE_COMMIT_MESSAGE_PATTERN,
        description="printf-style pattern for the release tag name",
    )
    allow_dirty: bool = Field(
        default=False,
        description="Allow releasing with uncommitted changes",
    )

    @field_validator("version_pattern")
    @classmethod
    def _check_version_pattern(cls, value: str) -> str:
        try:
            compiled = re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regex: {e}") from e
        if compiled.groups != 1:
            raise ValueError(
                f"it's expected to have a single capturing group but has {compiled.groups}"
            )
        return value

    @field_validator("exclude_patterns", "strip_patterns")
    @classmethod
    def _check_patterns(cls, value: list[str]) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid regex '{pattern}': {e}") from e
        return value

    @field_validator("additional_description")
    @classmethod
    def _check_additional_description(cls, value: str) -> str:
        if "\n" in value or "\r" in value:
            raise ValueError("additional description must fit on the release header line")
        return value

    @field_validator("tag_pattern")
    @classmethod
    def _check_tag_pattern(cls, value: str) -> str:
        if value.count("%s") != 1:
            raise ValueError("tag pattern must contain exactly one '%s' placeholder")
        return value

    def tag_name(self, version: str) -> str:
        """Tag name for ``version``; whitespace becomes '-' to keep it a valid ref."""
        return "-".join((self.tag_pattern % version).split())
