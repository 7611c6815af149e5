"""Tests for locating and rewriting the project version file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from release_paperwork.exceptions import PatternNotFoundError, VersionFileNotFoundError
from release_paperwork.project.version_file import (
    find_version_file,
    get_current_version,
    render_version_file,
    rewrite_version,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestFindVersionFile:
    """Tests for find_version_file()."""

    def test_groovy_preferred(self, tmp_path: Path):
        """build.gradle wins over build.gradle.kts."""
        (tmp_path / "build.gradle").write_text("version = '1.0.0'\n")
        (tmp_path / "build.gradle.kts").write_text('version = "1.0.0"\n')

        assert find_version_file(tmp_path).name == "build.gradle"

    def test_kotlin_dsl(self, tmp_path: Path):
        """build.gradle.kts is used when build.gradle is missing."""
        (tmp_path / "build.gradle.kts").write_text('version = "1.0.0"\n')

        assert find_version_file(tmp_path).name == "build.gradle.kts"

    def test_pyproject(self, tmp_path: Path):
        """pyproject.toml is the last default candidate."""
        (tmp_path / "pyproject.toml").write_text('[project]\nversion = "1.0.0"\n')

        assert find_version_file(tmp_path).name == "pyproject.toml"

    def test_none_found(self, tmp_path: Path):
        """No candidate file is an error."""
        with pytest.raises(VersionFileNotFoundError, match="build.gradle"):
            find_version_file(tmp_path)

    def test_configured(self, tmp_path: Path):
        """Configured file is used even when defaults exist."""
        (tmp_path / "build.gradle").write_text("version = '1.0.0'\n")
        (tmp_path / "pubspec.yaml").write_text("version: 1.0.0+1\n")

        assert find_version_file(tmp_path, "pubspec.yaml").name == "pubspec.yaml"

    def test_configured_missing(self, tmp_path: Path):
        """A configured file that doesn't exist is an error."""
        with pytest.raises(VersionFileNotFoundError, match="doesn't exist"):
            find_version_file(tmp_path, "xxx")


class TestRewriteVersion:
    """Tests for rewrite_version()."""

    def test_rewrite(self):
        """Version inside the match is replaced."""
        content = 'version = "1.0.0"\n'
        assert rewrite_version(content, None, "1.0.0", "1.1.0") == 'version = "1.1.0"\n'

    def test_only_first_match_touched(self):
        """Other occurrences of the same version stay unchanged."""
        content = (
            "plugins {\n"
            '  kotlin("jvm") version "1.7.20"\n'
            "}\n"
            "\n"
            'version = "1.7.20"\n'
            'val other = "1.7.20"\n'
        )
        result = rewrite_version(content, None, "1.7.20", "1.8.0")

        assert result == (
            "plugins {\n"
            '  kotlin("jvm") version "1.7.20"\n'
            "}\n"
            "\n"
            'version = "1.8.0"\n'
            'val other = "1.7.20"\n'
        )

    def test_literal_replacement(self):
        """Regex metacharacters in versions are taken literally."""
        content = "name: app\nversion: 1.0.0+1\n"
        result = rewrite_version(content, r"version:\s*([^\s]+)", "1.0.0+1", "1.1.0+2")

        assert result == "name: app\nversion: 1.1.0+2\n"

    def test_anchored_pattern(self):
        """Line anchors work against the whole content."""
        content = '[tool.x]\nversion_pattern = "y"\n\n[project]\nversion = "0.1.0"\n'
        result = rewrite_version(content, r'^version\s*=\s*"([^"]+)', "0.1.0", "0.2.0")

        assert result.endswith('version = "0.2.0"\n')
        assert 'version_pattern = "y"' in result

    def test_pattern_not_found(self):
        """Rewrite fails when the pattern doesn't match."""
        with pytest.raises(PatternNotFoundError, match="can't find version"):
            rewrite_version("nothing here\n", None, "1.0.0", "1.1.0")

    def test_match_without_old_version(self):
        """A match that doesn't hold the current version is not silently skipped."""
        with pytest.raises(PatternNotFoundError, match="doesn't contain version 1.0.0"):
            rewrite_version('version = "2.0.0"\n', None, "1.0.0", "1.1.0")

    def test_end_anchor_before_crlf(self):
        """Lines are matched without their line endings."""
        content = 'group = "x"\r\nversion = "1.0.0"\r\n'
        result = rewrite_version(content, r'^version\s*=\s*"([^"]+)"$', "1.0.0", "1.1.0")

        assert result == 'group = "x"\r\nversion = "1.1.0"\r\n'


class TestRenderVersionFile:
    """Tests for get_current_version() and render_version_file()."""

    def test_round_trip_on_disk(self, tmp_path: Path):
        """Rendered content keeps line endings and leaves the file alone."""
        path = tmp_path / "Version.kt"
        original = b'object Version {\r\n    const val APP = "1.21.0"\r\n}\r\n'
        path.write_bytes(original)
        pattern = r'APP\s+=\s+"([^"]+)'

        assert get_current_version(path, pattern) == "1.21.0"
        content = render_version_file(path, pattern, "1.21.0", "1.22.0")

        assert content == 'object Version {\r\n    const val APP = "1.22.0"\r\n}\r\n'
        assert path.read_bytes() == original

    def test_end_anchor_with_crlf(self, tmp_path: Path):
        """A '$' anchored pattern that reads a CRLF file also rewrites it."""
        path = tmp_path / "build.gradle"
        path.write_bytes(b"group = 'x'\r\nversion = \"1.0.0\"\r\n")
        pattern = r'^version\s*=\s*"([^"]+)"$'

        assert get_current_version(path, pattern) == "1.0.0"
        content = render_version_file(path, pattern, "1.0.0", "1.1.0")

        assert content == "group = 'x'\r\nversion = \"1.1.0\"\r\n"

    def test_missing_file(self, tmp_path: Path):
        """Missing file raises VersionFileNotFoundError."""
        with pytest.raises(VersionFileNotFoundError):
            get_current_version(tmp_path / "missing.gradle")
        with pytest.raises(VersionFileNotFoundError):
            render_version_file(tmp_path / "missing.gradle", None, "1.0.0", "1.1.0")
