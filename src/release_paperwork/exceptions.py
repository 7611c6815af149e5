"""Exception hierarchy for release-paperwork.

All errors raised on purpose derive from :class:`ReleasePaperworkError`,
so the CLI can report them uniformly and exit with a non-zero status.
Every fatal error is raised before anything is written to disk.
"""

from __future__ import annotations


class ReleasePaperworkError(Exception):
    """Base class for all release-paperwork errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ReleasePaperworkError):
    """Invalid or unusable configuration."""


class ConfigNotFoundError(ConfigError):
    """A configuration file could not be located."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


class BadPatternError(ConfigError):
    """A version extraction pattern is not a regex with one capture group."""


# =============================================================================
# Missing data
# =============================================================================


class DataNotFoundError(ReleasePaperworkError):
    """Required data is missing from the project."""


class VersionFileNotFoundError(DataNotFoundError):
    """The file holding the project version does not exist."""


class VersionNotFoundError(DataNotFoundError):
    """No line of the version file matches the version pattern."""


class PatternNotFoundError(DataNotFoundError):
    """The version pattern no longer matches when rewriting the version file."""


class MalformedVersionError(ReleasePaperworkError):
    """A version string is not ``major.minor.patch`` with an optional qualifier."""


# =============================================================================
# Release notes ledger
# =============================================================================


class LedgerError(ReleasePaperworkError):
    """The release notes file exists but cannot be interpreted."""


class MalformedReleaseHeaderError(LedgerError):
    """The topmost release header line has an unexpected shape."""


class MalformedBulletLineError(LedgerError):
    """The first change line of the topmost release has an unexpected shape."""


# =============================================================================
# Git
# =============================================================================


class GitError(ReleasePaperworkError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}: {self.stderr.strip()}"
        return base


class NotAGitRepositoryError(GitError):
    """The project directory is not inside a git work tree."""


class GitNotFoundError(GitError):
    """The git executable is not installed or not on PATH."""
