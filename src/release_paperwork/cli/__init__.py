"""Command line interface for release-paperwork."""

from __future__ import annotations

from release_paperwork.cli.app import app

__all__ = ["app"]
