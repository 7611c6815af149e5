"""Implementation of the 'release' command.

The release command writes the new release notes block and version,
then commits and tags them. Without ``--execute`` it only shows what
would happen.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from release_paperwork.config import load_config
from release_paperwork.core.changelog import TRUNCATION_MARKER
from release_paperwork.core.release import apply_release, plan_release
from release_paperwork.exceptions import ReleasePaperworkError
from release_paperwork.vcs import GitRepository

if TYPE_CHECKING:
    from datetime import date

    from rich.console import Console


def run_release(
    path: str | None,
    execute: bool,
    commit: bool,
    tag: bool,
    released_on: date | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Optional path to project directory
        execute: Whether to actually apply changes
        commit: Commit the release notes and version file
        tag: Tag the release commit
        released_on: Release date override
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path).resolve() if path else Path.cwd()

    try:
        config = load_config(project_path)
    except ReleasePaperworkError as e:
        err_console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    try:
        repo = GitRepository(project_path)
    except ReleasePaperworkError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if execute and commit and not config.allow_dirty and repo.is_dirty():
        err_console.print(
            "[red]Error:[/] Repository has uncommitted changes.\n"
            "Commit or stash them, or use [cyan]allow_dirty = true[/] in config."
        )
        raise SystemExit(1)

    try:
        plan = plan_release(project_path, config, repo, released_on=released_on)
    except ReleasePaperworkError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if plan is None:
        console.print("[yellow]No changes to release are detected. Nothing to do.[/]")
        return

    mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
    if plan.last_release is None:
        console.print(f"\n{mode_str} - First release! Releasing version [green]{plan.version}[/]\n")
    elif plan.is_manual_version:
        console.print(
            f"\n{mode_str} - Releasing manually set version [green]{plan.version}[/] "
            f"(last released [cyan]{plan.last_release.version}[/])\n"
        )
    else:
        console.print(
            f"\n{mode_str} - Releasing [green]{plan.version}[/] "
            f"(last released [cyan]{plan.last_release.version}[/])\n"
        )

    if not execute:
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n"
                f"  • Prepend to [cyan]{plan.release_notes_path.name}[/]:\n\n"
                f"{escape(_indent(plan.block))}\n"
                f"  • Set version [green]{plan.version}[/] in [cyan]{plan.version_file.name}[/]\n"
                + (f"  • Commit '[cyan]{plan.commit_message}[/]'\n" if commit else "")
                + (f"  • Tag [cyan]{plan.tag_name}[/]" if commit and tag else ""),
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run with [cyan]--execute[/] to apply these changes.[/]")
        return

    try:
        sha = apply_release(plan, repo, commit=commit, tag=tag)
    except ReleasePaperworkError as e:
        err_console.print(f"[red]Error applying release:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    listed = sum(1 for line in plan.block.splitlines() if line.startswith("  * ") and line != TRUNCATION_MARKER)
    console.print(f"  [green]✓[/] Added {listed} change(s) to {plan.release_notes_path.name}")
    console.print(f"  [green]✓[/] Updated version in {plan.version_file.name}")
    if sha:
        console.print(f"  [green]✓[/] Committed {sha[:12]}")
        if tag:
            console.print(f"  [green]✓[/] Tagged {plan.tag_name}")

    console.print(
        Panel(
            f"[green]Successfully released version {plan.version}![/]\n\n"
            "Next steps:\n"
            "  1. Review the release commit\n"
            "  2. Push: [cyan]git push --follow-tags[/]",
            title="[green]Release Complete[/]",
            border_style="green",
        )
    )


def _indent(text: str) -> str:
    return "\n".join(f"    {line}" for line in text.splitlines())
