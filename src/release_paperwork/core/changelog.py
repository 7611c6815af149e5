"""Release notes rendering.

A release block is a header line followed by one line per change::

    ## v1.1.0 released on 21 Oct 2022 UTC
      * 6d1e0f3c... feature3
      * 41b0a2d9... feature2

New blocks are prepended to the existing content; prior content is kept
byte for byte.
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from release_paperwork.core.commits import DEFAULT_MAX_CHANGES_PER_RELEASE, effective_max_changes
from release_paperwork.fs import read_text

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from release_paperwork.core.commits import ChangeEntry

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "  * ..."

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def today_utc() -> date:
    return datetime.now(UTC).date()


def format_release_date(released_on: date) -> str:
    """Format a date as ``DD Mon YYYY UTC`` independently of the locale."""
    return f"{released_on.day:02d} {_MONTHS[released_on.month - 1]} {released_on.year:04d} UTC"


def format_release_header(
    version: str,
    released_on: date | None = None,
    additional_description: str | None = None,
) -> str:
    """Build the header line of a release block.

    Args:
        version: Released version
        released_on: Release date, today in UTC if omitted
        additional_description: Text appended verbatim after the date

    Returns:
        ``## v<version> released on <DD Mon YYYY> UTC<additional_description>``
    """
    when = released_on or today_utc()
    return f"## v{version} released on {format_release_date(when)}{additional_description or ''}"


def render_release_block(
    version: str,
    changes: Sequence[ChangeEntry],
    max_changes: int | None = DEFAULT_MAX_CHANGES_PER_RELEASE,
    *,
    released_on: date | None = None,
    additional_description: str | None = None,
) -> str:
    """Render a release block.

    At most ``max_changes`` change lines are written; if more changes were
    collected, a single ``  * ...`` line follows them.

    Args:
        version: Released version
        changes: Changes, newest first
        max_changes: Cap on change lines; non-positive or None means unlimited
        released_on: Release date, today in UTC if omitted
        additional_description: Extra header text

    Returns:
        Block text, every line terminated by a newline
    """
    limit = effective_max_changes(max_changes)
    lines = [format_release_header(version, released_on, additional_description)]

    for i, change in enumerate(changes):
        if limit is not None and i >= limit:
            lines.append(TRUNCATION_MARKER)
            break
        line = change.format()
        logger.info("Adding the following change into release notes: %s", line)
        lines.append(line)

    return "\n".join(lines) + "\n"


def prepend_release_block(block: str, existing: str | None) -> str:
    """Put a new block in front of existing release notes content."""
    if not existing:
        return block
    return block + existing


def render_release_notes(path: Path, block: str) -> str:
    """Return the release notes content with ``block`` prepended.

    Args:
        path: Release notes file, which may not exist yet
        block: Rendered release block

    Returns:
        The full new content; nothing is written
    """
    existing = read_text(path) if path.is_file() else None
    return prepend_release_block(block, existing)
