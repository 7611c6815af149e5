"""Core business logic for release-paperwork.

This module contains the fundamental building blocks:
- Version parsing, extraction and increment
- Recovery of the last release from the release notes
- Collection of unreleased changes from the commit log
- Release notes rendering
- Release orchestration
"""

from __future__ import annotations

from release_paperwork.core.changelog import format_release_header, render_release_block, render_release_notes
from release_paperwork.core.commits import (
    ChangeClassifier,
    ChangeEntry,
    build_classifier,
    collapse_message,
    collect_changes,
)
from release_paperwork.core.ledger import ReleaseRecord, parse_release_record, read_release_record
from release_paperwork.core.release import ReleasePlan, apply_release, plan_release
from release_paperwork.core.version import (
    Qualifier,
    QualifierKind,
    Version,
    extract_version,
    parse_version,
    resolve_release_version,
)

__all__ = [
    "ChangeClassifier",
    "ChangeEntry",
    "Qualifier",
    "QualifierKind",
    "ReleasePlan",
    "ReleaseRecord",
    "Version",
    "apply_release",
    "build_classifier",
    "collapse_message",
    "collect_changes",
    "extract_version",
    "format_release_header",
    "parse_release_record",
    "parse_version",
    "plan_release",
    "read_release_record",
    "render_release_block",
    "render_release_notes",
    "resolve_release_version",
]
