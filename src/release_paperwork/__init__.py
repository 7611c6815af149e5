"""release-paperwork: release notes and version bookkeeping from git history.

Reads the last release recorded in the release notes file, collects the
commits made since then, picks the next version, prepends a new release
block and commits the result with a release tag.
"""

from __future__ import annotations

__version__ = "1.2.0"

__all__ = ["__version__"]
