"""Typer application for release-paperwork."""

from __future__ import annotations

from datetime import date
from typing import Annotated

import typer
from rich.console import Console

from release_paperwork import __version__
from release_paperwork.logging import setup_logging

app = typer.Typer(
    name="release-paperwork",
    help="Populate release notes from git commits, bump the version, commit and tag.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"release-paperwork {__version__}")
        raise typer.Exit()


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"'{value}' is not a YYYY-MM-DD date") from e


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit."),
    ] = False,
) -> None:
    """release-paperwork command line."""


@app.command()
def release(
    path: Annotated[str | None, typer.Argument(help="Project directory (default: current directory).")] = None,
    execute: Annotated[bool, typer.Option("--execute", help="Apply changes instead of a dry run.")] = False,
    no_commit: Annotated[bool, typer.Option("--no-commit", help="Write files but don't commit or tag.")] = False,
    no_tag: Annotated[bool, typer.Option("--no-tag", help="Commit but don't tag.")] = False,
    release_date: Annotated[
        str | None, typer.Option("--date", help="Release date as YYYY-MM-DD (default: today, UTC).")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging.")] = False,
) -> None:
    """Prepare a release: release notes, version bump, commit and tag."""
    from release_paperwork.cli.commands.release import run_release

    setup_logging(verbose, err_console)
    run_release(
        path=path,
        execute=execute,
        commit=not no_commit,
        tag=not no_tag,
        released_on=_parse_date(release_date),
        console=console,
        err_console=err_console,
    )


@app.command()
def status(
    path: Annotated[str | None, typer.Argument(help="Project directory (default: current directory).")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging.")] = False,
) -> None:
    """Show the last release and the pending changes."""
    from release_paperwork.cli.commands.status import run_status

    setup_logging(verbose, err_console)
    run_status(path=path, console=console, err_console=err_console)
