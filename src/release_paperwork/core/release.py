"""Release orchestration.

A release happens in two steps. :func:`plan_release` performs every read
and computation (version file, release notes, commit log) and returns a
:class:`ReleasePlan` holding the new content of both files.
:func:`apply_release` then replaces the two files and records them as a
commit with a tag. Any error raised while planning leaves the project
untouched.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from release_paperwork.core.changelog import render_release_block, render_release_notes
from release_paperwork.core.commits import (
    RELEASE_COMMIT_MESSAGE_PATTERN,
    build_classifier,
    collect_changes,
    effective_max_changes,
)
from release_paperwork.core.ledger import read_release_record
from release_paperwork.core.version import compile_version_pattern, resolve_release_version
from release_paperwork.exceptions import ConfigValidationError, GitError
from release_paperwork.fs import atomic_write_text
from release_paperwork.project.version_file import find_version_file, get_current_version, render_version_file

if TYPE_CHECKING:
    from pathlib import Path

    from release_paperwork.config.models import ReleasePaperworkConfig
    from release_paperwork.core.commits import ChangeClassifier, ChangeEntry
    from release_paperwork.core.ledger import ReleaseRecord
    from release_paperwork.vcs.git import GitRepository

logger = logging.getLogger(__name__)

RELEASE_DATE_ENV_VAR = "RELEASE_PAPERWORK_DATE"


@dataclass(frozen=True)
class ReleasePlan:
    """Everything needed to write a release, computed up front.

    Attributes:
        version: Version being released
        current_version: Version found in the version file
        last_release: Release recovered from the release notes, if any
        changes: Collected changes, newest first (may exceed the cap by one)
        release_notes_path: Release notes file
        version_file: File holding the project version
        block: Rendered release block
        release_notes: New content of the release notes file
        version_file_content: New content of the version file
        tag_name: Name of the release tag
        commit_message: Message of the release commit
    """

    version: str
    current_version: str
    last_release: ReleaseRecord | None
    changes: list[ChangeEntry]
    release_notes_path: Path
    version_file: Path
    block: str
    release_notes: str
    version_file_content: str
    tag_name: str
    commit_message: str

    @property
    def is_manual_version(self) -> bool:
        return self.last_release is not None and self.current_version != self.last_release.version


def release_date_from_env() -> date | None:
    """Release date override from ``RELEASE_PAPERWORK_DATE`` (``YYYY-MM-DD``)."""
    value = os.environ.get(RELEASE_DATE_ENV_VAR)
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ConfigValidationError(
            f"Invalid {RELEASE_DATE_ENV_VAR} value '{value}', expected YYYY-MM-DD"
        ) from e


def plan_release(
    project_path: Path,
    config: ReleasePaperworkConfig,
    repo: GitRepository,
    *,
    released_on: date | None = None,
    classifier: ChangeClassifier | None = None,
) -> ReleasePlan | None:
    """Compute the next release without writing anything.

    Args:
        project_path: Project root directory
        config: Release configuration
        repo: Repository providing the commit log
        released_on: Release date; RELEASE_PAPERWORK_DATE or today in UTC if omitted
        classifier: Change classifier overriding the configured one

    Returns:
        The release plan, or None if there is nothing to release
    """
    pattern = compile_version_pattern(config.version_pattern)
    if classifier is None:
        classifier = build_classifier(
            config.change_description,
            config.exclude_patterns,
            config.strip_patterns,
        )

    release_notes_path = project_path / config.release_notes_file
    logger.info("Using release notes file %s", release_notes_path)

    version_file = find_version_file(project_path, config.version_file)
    current_version = get_current_version(version_file, pattern)
    last_release = read_release_record(release_notes_path)

    max_changes = effective_max_changes(config.max_changes_per_release)
    changes = collect_changes(
        repo.iter_commits(),
        last_release.last_commit_sha if last_release else None,
        classifier,
        max_changes,
    )
    if not changes:
        logger.info("No changes to release are detected")
        return None

    version = resolve_release_version(current_version, last_release)
    logger.info("Using version '%s' for releasing", version)

    tag_name = config.tag_name(version)
    if repo.tag_exists(tag_name):
        raise GitError(f"Can't release version {version}: tag '{tag_name}' already exists")

    block = render_release_block(
        version,
        changes,
        max_changes,
        released_on=released_on or release_date_from_env(),
        additional_description=config.additional_description,
    )
    release_notes = render_release_notes(release_notes_path, block)
    version_file_content = render_version_file(version_file, pattern, current_version, version)

    return ReleasePlan(
        version=version,
        current_version=current_version,
        last_release=last_release,
        changes=changes,
        release_notes_path=release_notes_path,
        version_file=version_file,
        block=block,
        release_notes=release_notes,
        version_file_content=version_file_content,
        tag_name=tag_name,
        commit_message=RELEASE_COMMIT_MESSAGE_PATTERN % version,
    )


def apply_release(
    plan: ReleasePlan,
    repo: GitRepository,
    *,
    commit: bool = True,
    tag: bool = True,
) -> str | None:
    """Write a planned release and record it in git.

    Args:
        plan: Plan produced by :func:`plan_release`
        repo: Repository to commit to
        commit: Commit the changed files
        tag: Tag the release commit (only when committing)

    Returns:
        Hash of the release commit, or None if nothing was committed
    """
    plan.release_notes_path.parent.mkdir(parents=True, exist_ok=True)
    atomic_write_text(plan.release_notes_path, plan.release_notes)
    atomic_write_text(plan.version_file, plan.version_file_content)
    logger.info("Updated %s and %s", plan.release_notes_path.name, plan.version_file.name)

    if not commit:
        return None

    sha = repo.commit_paths([plan.release_notes_path, plan.version_file], plan.commit_message)
    if tag:
        repo.tag(plan.tag_name, sha, plan.commit_message)
        logger.info("Tagged release commit %s as '%s'", sha, plan.tag_name)
    return sha
