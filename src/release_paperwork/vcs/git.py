"""Thin wrapper around the ``git`` executable.

Only the operations needed for a release are exposed: reading the commit
log newest first, checking for uncommitted changes, staging files,
committing and tagging.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from release_paperwork.exceptions import GitError, GitNotFoundError, NotAGitRepositoryError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"


@dataclass(frozen=True, slots=True)
class Commit:
    """A commit as seen in the history log.

    Attributes:
        sha: Full commit hash
        message: Full commit message, possibly multi-line
    """

    sha: str
    message: str

    @property
    def subject(self) -> str:
        """First line of the message."""
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ""


class GitRepository:
    """A git work tree driven through the ``git`` command line."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).resolve()
        self._cwd = self.path
        try:
            top = self._run("rev-parse", "--show-toplevel")
        except GitNotFoundError:
            raise
        except GitError as e:
            raise NotAGitRepositoryError(f"Not a git repository: {self.path}", stderr=e.stderr) from e
        self.root = Path(top).resolve()
        self._cwd = self.root

    def _run(self, *args: str) -> str:
        """Run a git command in the repository and return its stdout."""
        try:
            result = subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=True,
                cwd=self._cwd,
            )
        except FileNotFoundError as e:
            raise GitNotFoundError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", stderr=e.stderr) from e
        return result.stdout.strip()

    def has_commits(self) -> bool:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD"],
            capture_output=True,
            text=True,
            check=False,
            cwd=self._cwd,
        )
        return result.returncode == 0

    def iter_commits(self) -> list[Commit]:
        """Return commits reachable from HEAD, newest first.

        Returns:
            Commits in reverse chronological order; empty for a fresh repository
        """
        if not self.has_commits():
            return []

        output = self._run("log", f"--format=%H{_FIELD_SEP}%B{_RECORD_SEP}", "HEAD")
        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, _, message = record.partition(_FIELD_SEP)
            commits.append(Commit(sha=sha.strip(), message=message.strip()))
        return commits

    def is_dirty(self) -> bool:
        """Check for uncommitted changes to tracked files."""
        return bool(self._run("status", "--porcelain", "--untracked-files=no"))

    def relative_path(self, path: Path) -> str:
        """Path relative to the repository root, in git's forward slash form."""
        return Path(path).resolve().relative_to(self.root).as_posix()

    def add(self, paths: Iterable[Path]) -> None:
        """Stage files for commit."""
        relative = [self.relative_path(p) for p in paths]
        for p in relative:
            logger.info("Committing file %s", p)
        self._run("add", "--", *relative)

    def commit(self, message: str) -> str:
        """Commit staged changes.

        Returns:
            Hash of the new commit
        """
        self._run("commit", "-m", message)
        return self._run("rev-parse", "HEAD")

    def tag_exists(self, name: str) -> bool:
        return bool(self._run("tag", "--list", name))

    def tag(self, name: str, sha: str, message: str) -> None:
        """Create an annotated tag pointing at ``sha``."""
        if self.tag_exists(name):
            raise GitError(f"Tag '{name}' already exists")
        self._run("tag", "-a", name, sha, "-m", message)

    def commit_paths(self, paths: Sequence[Path], message: str) -> str:
        """Stage ``paths`` and commit them with ``message``."""
        self.add(paths)
        return self.commit(message)
