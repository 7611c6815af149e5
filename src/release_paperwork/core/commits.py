"""Collection of unreleased changes from the commit log.

Commits are walked newest first. Release commits made by this tool are
skipped, the walk stops at the newest commit of the previous release,
and every remaining commit message is collapsed to one line and passed
through a change classifier that may rewrite or drop it.
"""

from __future__ import annotations

import importlib
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from release_paperwork.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from release_paperwork.vcs.git import Commit

logger = logging.getLogger(__name__)

RELEASE_COMMIT_MESSAGE_PATTERN = "release %s"
DEFAULT_MAX_CHANGES_PER_RELEASE = 20


def release_commit_regex(message_pattern: str = RELEASE_COMMIT_MESSAGE_PATTERN) -> re.Pattern[str]:
    """Build the regex recognising release commits from their message format."""
    prefix, _, suffix = message_pattern.partition("%s")
    return re.compile(re.escape(prefix) + r"\S+" + re.escape(suffix))


RELEASE_COMMIT_REGEX = release_commit_regex()


@dataclass(frozen=True, slots=True)
class ChangeEntry:
    """One line of release notes.

    Attributes:
        sha: Hash of the commit
        description: Single-line change description
    """

    sha: str
    description: str

    def format(self) -> str:
        return f"  * {self.sha} {self.description}"


@runtime_checkable
class ChangeClassifier(Protocol):
    """Maps a one-line commit message to a change description.

    Returning None or a blank string drops the commit from the release notes.
    """

    def __call__(self, message: str) -> str | None: ...


def identity(message: str) -> str | None:
    """Use the commit message as is."""
    return message


class ExcludePatternClassifier:
    """Drop commits whose message matches any of the given regexes."""

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns = [re.compile(p, re.IGNORECASE) for p in patterns]

    def __call__(self, message: str) -> str | None:
        if any(p.search(message) for p in self.patterns):
            return None
        return message


class StripPatternClassifier:
    """Remove every match of the given regexes, e.g. merge commit boilerplate."""

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns = [re.compile(p) for p in patterns]

    def __call__(self, message: str) -> str | None:
        for pattern in self.patterns:
            message = pattern.sub("", message)
        return message.strip()


class ChainedClassifier:
    """Apply classifiers in order, stopping as soon as one drops the commit."""

    def __init__(self, classifiers: Sequence[ChangeClassifier]) -> None:
        self.classifiers = list(classifiers)

    def __call__(self, message: str) -> str | None:
        result: str | None = message
        for classifier in self.classifiers:
            result = classifier(result)
            if result is None or not result.strip():
                return None
        return result


def load_classifier(reference: str) -> ChangeClassifier:
    """Import a classifier from a ``module:attribute`` reference.

    Args:
        reference: Import path, e.g. ``mypkg.release:describe``

    Returns:
        The referenced callable

    Raises:
        ConfigValidationError: If the reference can't be imported or isn't callable
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigValidationError(
            f"Invalid change description reference '{reference}', expected 'module:attribute'"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigValidationError(f"Can't import module '{module_name}' for change description: {e}") from e

    target = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ConfigValidationError(f"Module '{module_name}' has no attribute '{attr}'") from e

    if not callable(target):
        raise ConfigValidationError(f"Change description '{reference}' is not callable")
    return target


def collapse_message(message: str) -> str:
    """Turn a commit message into a one-line description.

    Only the first paragraph is kept, as in the subject shown by
    ``git log --format=%s``. Its lines are trimmed and joined with single
    spaces.
    """
    lines = []
    for line in message.strip().splitlines():
        if not line.strip():
            break
        lines.append(line.strip())
    return " ".join(lines)


def is_release_commit(commit: Commit, regex: re.Pattern[str] = RELEASE_COMMIT_REGEX) -> bool:
    """Check whether a commit was created by a previous release."""
    return regex.fullmatch(commit.subject) is not None


def effective_max_changes(max_changes: int | None) -> int | None:
    """Normalize a change cap; non-positive values mean no limit."""
    if max_changes is None or max_changes <= 0:
        return None
    return max_changes


def collect_changes(
    commits: Iterable[Commit],
    boundary_sha: str | None,
    classifier: ChangeClassifier | None = None,
    max_changes: int | None = DEFAULT_MAX_CHANGES_PER_RELEASE,
    release_regex: re.Pattern[str] = RELEASE_COMMIT_REGEX,
) -> list[ChangeEntry]:
    """Collect unreleased changes, newest first.

    Args:
        commits: Commit log, newest first
        boundary_sha: Newest commit of the previous release, or None
        classifier: Maps a commit message to a description, None keeps it as is
        max_changes: Cap on changes per release; non-positive or None means unlimited
        release_regex: Regex matching release commit subjects

    Returns:
        Change entries in history order, newest first. When the cap is hit,
        one entry beyond it is kept so the renderer knows to truncate.
    """
    classify = classifier or identity
    limit = effective_max_changes(max_changes)
    result: list[ChangeEntry] = []

    for commit in commits:
        if is_release_commit(commit, release_regex):
            continue
        if boundary_sha is not None and commit.sha == boundary_sha:
            break

        message = collapse_message(commit.message)
        description = classify(message)
        if description is None or not description.strip():
            logger.info(
                "Commit %s is skipped because its message is dropped by custom commit "
                "description filtering logic (%s)",
                commit.sha,
                message,
            )
            continue

        result.append(ChangeEntry(sha=commit.sha, description=collapse_message(description)))
        if limit is not None and len(result) > limit:
            break

    return result


def build_classifier(
    reference: str | None = None,
    exclude_patterns: Sequence[str] = (),
    strip_patterns: Sequence[str] = (),
) -> ChangeClassifier:
    """Assemble the classifier described by configuration.

    Exclusions run first, then stripping, then the user classifier.
    """
    classifiers: list[ChangeClassifier] = []
    if exclude_patterns:
        classifiers.append(ExcludePatternClassifier(exclude_patterns))
    if strip_patterns:
        classifiers.append(StripPatternClassifier(strip_patterns))
    if reference:
        classifiers.append(load_classifier(reference))

    if not classifiers:
        return identity
    if len(classifiers) == 1:
        return classifiers[0]
    return ChainedClassifier(classifiers)
