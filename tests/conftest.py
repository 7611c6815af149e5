"""Shared fixtures for release-paperwork tests."""

from __future__ import annotations

import shutil
import subprocess
import uuid
from pathlib import Path

import pytest

from release_paperwork.vcs.git import Commit, GitRepository


class GitWorkspace:
    """A throwaway git repository with helpers for making commits."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, message: str) -> str:
        """Commit a new random file and return the commit hash."""
        name = uuid.uuid4().hex
        (self.path / name).write_text(name)
        self.git("add", name)
        self.git("commit", "-q", "-m", message)
        return self.git("rev-parse", "HEAD")

    def commit_all(self, message: str) -> str:
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        return self.git("rev-parse", "HEAD")

    def sha_of(self, subject: str) -> str:
        for line in self.git("log", "--format=%H %s").splitlines():
            sha, _, message = line.partition(" ")
            if message == subject:
                return sha
        raise AssertionError(f"no commit with subject '{subject}'")

    def tags(self) -> list[str]:
        return self.git("tag", "--list").splitlines()

    @property
    def repo(self) -> GitRepository:
        return GitRepository(self.path)


@pytest.fixture
def git_workspace(tmp_path: Path) -> GitWorkspace:
    """An initialized git repository with a local identity configured."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    workspace = GitWorkspace(tmp_path)
    workspace.git("init", "-q")
    workspace.git("config", "user.email", "test@test.com")
    workspace.git("config", "user.name", "Test")
    workspace.git("config", "commit.gpgsign", "false")
    workspace.git("config", "tag.gpgsign", "false")
    return workspace


@pytest.fixture
def gradle_project(git_workspace: GitWorkspace) -> GitWorkspace:
    """A repository with build.gradle.kts at version 1.0.0 and one 'feature1' commit."""
    (git_workspace.path / "build.gradle.kts").write_text('plugins {\n  id("x")\n}\n\nversion = "1.0.0"\n')
    git_workspace.git("add", "build.gradle.kts")
    git_workspace.git("commit", "-q", "-m", "feature1")
    return git_workspace


@pytest.fixture
def sample_commits() -> list[Commit]:
    """Commit log, newest first."""
    return [
        Commit("c5", "feature5"),
        Commit("c4", "release 1.1.0"),
        Commit("c3", "feature3\n\nwith a body"),
        Commit("c2", "feature2"),
        Commit("c1", "feature1"),
    ]
