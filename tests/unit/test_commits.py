"""Tests for collecting unreleased changes."""

from __future__ import annotations

import pytest

from release_paperwork.core.commits import (
    ChainedClassifier,
    ChangeClassifier,
    ChangeEntry,
    ExcludePatternClassifier,
    StripPatternClassifier,
    build_classifier,
    collapse_message,
    collect_changes,
    identity,
    is_release_commit,
    load_classifier,
    release_commit_regex,
)
from release_paperwork.exceptions import ConfigValidationError
from release_paperwork.vcs.git import Commit


class TestCollapseMessage:
    """Tests for collapse_message()."""

    def test_multiline(self):
        """Lines are joined with single spaces."""
        assert collapse_message("feature2 line1\nline2") == "feature2 line1 line2"

    def test_trimmed(self):
        """Surrounding whitespace is removed."""
        assert collapse_message("  feature \n") == "feature"

    def test_crlf(self):
        """Windows line endings collapse like plain newlines."""
        assert collapse_message("a\r\nb") == "a b"

    def test_body_dropped(self):
        """Text after the first blank line is not part of the description."""
        assert collapse_message("feature3\n\nwith a body") == "feature3"

    def test_line_whitespace(self):
        """Indentation and trailing spaces don't produce double spaces."""
        assert collapse_message("fix parser  \n   for nested blocks\r\n \nbody") == "fix parser for nested blocks"


class TestIsReleaseCommit:
    """Tests for is_release_commit()."""

    def test_release_commit(self):
        """'release <version>' commits are recognised."""
        assert is_release_commit(Commit("a", "release 1.2.0"))

    def test_regular_commit(self):
        """Other commits are not release commits."""
        assert not is_release_commit(Commit("a", "release notes cleanup for 1.2.0"))
        assert not is_release_commit(Commit("a", "prepare release 1.2.0"))

    def test_custom_message_format(self):
        """Regex can be derived from another message format."""
        regex = release_commit_regex("chore(release): %s")
        assert is_release_commit(Commit("a", "chore(release): 1.0.0"), regex)
        assert not is_release_commit(Commit("a", "release 1.0.0"), regex)


class TestCollectChanges:
    """Tests for collect_changes()."""

    def test_collect_all_without_boundary(self, sample_commits: list[Commit]):
        """Without a boundary the whole history is collected, newest first."""
        changes = collect_changes(sample_commits, None)

        assert [c.sha for c in changes] == ["c5", "c3", "c2", "c1"]

    def test_release_commits_skipped(self, sample_commits: list[Commit]):
        """Release commits never appear as changes."""
        changes = collect_changes(sample_commits, None)

        assert all("release" not in c.description for c in changes)

    def test_boundary_is_exclusive(self, sample_commits: list[Commit]):
        """Collection stops before the boundary commit."""
        changes = collect_changes(sample_commits, "c2")

        assert [c.sha for c in changes] == ["c5", "c3"]

    def test_boundary_at_head(self, sample_commits: list[Commit]):
        """Nothing is collected when the newest commit is already released."""
        assert collect_changes(sample_commits, "c5") == []

    def test_boundary_behind_release_commit(self):
        """The release commit on top of the released commit doesn't count as a change."""
        commits = [Commit("r", "release 1.0.0"), Commit("c1", "feature1")]
        assert collect_changes(commits, "c1") == []

    def test_first_paragraph_only(self, sample_commits: list[Commit]):
        """A message with a body is described by its first paragraph."""
        changes = collect_changes(sample_commits, None)

        assert ChangeEntry("c3", "feature3") in changes

    def test_classifier_rewrites(self, sample_commits: list[Commit]):
        """Classifier output becomes the description."""
        changes = collect_changes(sample_commits, None, lambda m: m.upper())

        assert changes[0] == ChangeEntry("c5", "FEATURE5")

    def test_classifier_drops(self, sample_commits: list[Commit]):
        """None or blank classifier output drops the commit without stopping."""

        def classify(message: str) -> str | None:
            if message == "feature3":
                return None
            if message == "feature2":
                return "   "
            return message

        changes = collect_changes(sample_commits, None, classify)

        assert [c.sha for c in changes] == ["c5", "c1"]

    def test_all_dropped(self, sample_commits: list[Commit]):
        """Dropping every commit yields an empty collection."""
        assert collect_changes(sample_commits, None, lambda _m: None) == []

    def test_dropped_commit_before_boundary_does_not_stop(self):
        """Dropped commits have no effect on where collection stops."""
        commits = [Commit("c3", "feature3"), Commit("c2", "wip"), Commit("c1", "feature1")]
        changes = collect_changes(commits, "c1", lambda m: None if m == "wip" else m)

        assert [c.sha for c in changes] == ["c3"]

    def test_collects_one_past_limit(self):
        """Collection stops one entry past the cap."""
        commits = [Commit(f"c{i}", f"feature{i}") for i in range(10, 0, -1)]
        changes = collect_changes(commits, None, max_changes=3)

        assert [c.sha for c in changes] == ["c10", "c9", "c8", "c7"]

    @pytest.mark.parametrize("max_changes", [0, -1, None])
    def test_non_positive_limit_is_unlimited(self, max_changes: int | None):
        """Non-positive cap means no limit."""
        commits = [Commit(f"c{i}", f"feature{i}") for i in range(30, 0, -1)]

        assert len(collect_changes(commits, None, max_changes=max_changes)) == 30

    def test_unknown_boundary_collects_everything(self, sample_commits: list[Commit]):
        """A boundary missing from history means the whole history is unreleased."""
        assert len(collect_changes(sample_commits, "deadbeef")) == 4


class TestChangeEntry:
    """Tests for ChangeEntry.format()."""

    def test_format(self):
        """Entries render as indented bullet lines."""
        assert ChangeEntry("abc", "feature").format() == "  * abc feature"


class TestClassifiers:
    """Tests for built-in classifiers."""

    def test_identity(self):
        """Identity keeps the message."""
        assert identity("feature") == "feature"
        assert isinstance(identity, ChangeClassifier)

    def test_exclude_patterns(self):
        """Matching messages are dropped, case-insensitively."""
        classify = ExcludePatternClassifier([r"\[skip release\]", r"^wip\b"])

        assert classify("fix bug [SKIP RELEASE]") is None
        assert classify("WIP stuff") is None
        assert classify("feature") == "feature"

    def test_strip_patterns(self):
        """Merge boilerplate is removed and the rest trimmed."""
        classify = StripPatternClassifier([r"[Mm]erged branch '[^']+' into '[^']+'"])

        assert classify("Merged branch 'bla' into 'bla-bla'") == ""
        assert classify("feature Merged branch 'a' into 'b'") == "feature"

    def test_chain_stops_on_drop(self):
        """Chained classifiers stop once one drops the message."""
        calls = []

        def record(message: str) -> str:
            calls.append(message)
            return message

        classify = ChainedClassifier([lambda _m: None, record])

        assert classify("feature") is None
        assert calls == []

    def test_build_classifier_default(self):
        """No configuration gives the identity classifier."""
        assert build_classifier() is identity

    def test_build_classifier_chain(self):
        """Exclusions and stripping combine."""
        classify = build_classifier(exclude_patterns=["^wip"], strip_patterns=[r"\s*\(#\d+\)"])

        assert classify("wip: something") is None
        assert classify("add feature (#12)") == "add feature"

    def test_load_classifier(self):
        """A module:attribute reference is imported."""
        classify = load_classifier("release_paperwork.core.commits:identity")

        assert classify is identity

    @pytest.mark.parametrize(
        "reference",
        [
            "no_colon",
            "release_paperwork.core.commits:missing",
            "release_paperwork_missing_module:func",
            "release_paperwork.core.commits:DEFAULT_MAX_CHANGES_PER_RELEASE",
        ],
    )
    def test_load_classifier_invalid(self, reference: str):
        """Bad references are configuration errors."""
        with pytest.raises(ConfigValidationError):
            load_classifier(reference)
