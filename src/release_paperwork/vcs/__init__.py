"""Version control access for release-paperwork."""

from __future__ import annotations

from release_paperwork.vcs.git import Commit, GitRepository

__all__ = ["Commit", "GitRepository"]
