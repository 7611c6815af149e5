"""Implementation of the 'status' command.

Shows the last recorded release, the version in the version file and
the changes that the next release would list. Nothing is written.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from release_paperwork.config import load_config
from release_paperwork.core.commits import build_classifier, collect_changes
from release_paperwork.core.ledger import read_release_record
from release_paperwork.core.version import resolve_release_version
from release_paperwork.exceptions import ReleasePaperworkError
from release_paperwork.project.version_file import find_version_file, get_current_version
from release_paperwork.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console


def run_status(path: str | None, console: Console, err_console: Console) -> None:
    """Run the status command.

    Args:
        path: Optional path to project directory
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path).resolve() if path else Path.cwd()

    try:
        config = load_config(project_path)
        repo = GitRepository(project_path)
        version_file = find_version_file(project_path, config.version_file)
        current_version = get_current_version(version_file, config.version_pattern)
        last_release = read_release_record(project_path / config.release_notes_file)
        changes = collect_changes(
            repo.iter_commits(),
            last_release.last_commit_sha if last_release else None,
            build_classifier(config.change_description, config.exclude_patterns, config.strip_patterns),
            max_changes=None,
        )
        next_version = resolve_release_version(current_version, last_release) if changes else None
    except ReleasePaperworkError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Release notes", str(config.release_notes_file))
    table.add_row("Version file", version_file.name)
    table.add_row("Current version", current_version)
    table.add_row("Last released", last_release.version if last_release else "[dim]none[/]")
    table.add_row("Boundary commit", last_release.last_commit_sha if last_release else "[dim]none[/]")
    table.add_row("Unreleased changes", str(len(changes)))
    table.add_row("Next version", next_version or "[dim]nothing to release[/]")
    console.print(table)

    for change in changes:
        console.print(f"  [dim]{change.sha[:12]}[/] {escape(change.description)}")
