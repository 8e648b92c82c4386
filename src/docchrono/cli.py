"""Command line interface for docchrono."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from docchrono.config import AppConfig
from docchrono.errors import DocChronoError, VCSError
from docchrono.processing import RunStats, run
from docchrono.vcs import check_version_control


console = Console()
app = typer.Typer(
    help=(
        "docchrono - keep the `date` and `updated` front matter fields in sync "
        "with git history. `date` is the original publish date (today or earlier); "
        "`updated` is only set when the page changed on a later day."
    )
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _print_stats(stats: RunStats, check_only: bool) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Would change" if check_only else "Changed")
    table.add_column("Not changed")
    table.add_column("Skipped")
    table.add_column("Errors")
    table.add_row(str(stats.changed), str(stats.not_changed), str(stats.skipped), str(stats.errors))
    console.print(table)


def _fail(exc: Exception) -> None:
    console.print(str(exc), style="red", markup=False)
    raise typer.Exit(code=1)


@app.command()
def main(
    root_path: Path = typer.Argument(
        Path("."),
        help="Folder to start at, usually the content folder of the site. It must be "
        "in a git repository with a clean working tree.",
    ),
    unattended: bool = typer.Option(
        False, "--unattended", "-u", help="Do not ask for confirmation before running."
    ),
    check: bool = typer.Option(
        False,
        "--check",
        "-c",
        help="Do not modify any files, only report how many would change. "
        "Exit codes: 0 nothing to change, 1 error, 2 files would change.",
    ),
    allow_dirty: bool = typer.Option(
        False,
        "--allow-dirty",
        help="Run even with uncommitted changes. There is then no easy way to undo "
        "the changes made, so prefer staging your files instead.",
    ),
    allow_no_vcs: bool = typer.Option(
        False, "--allow-no-vcs", help="Run even if the folder is not under git."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Update the `date` and `updated` fields of every page under ROOT_PATH."""
    _setup_logging(verbose)
    config = AppConfig(
        root_path=root_path,
        unattended=unattended,
        check_only=check,
        allow_dirty=allow_dirty,
        allow_no_vcs=allow_no_vcs,
        verbose=verbose,
    )
    root = config.resolve_root(Path.cwd())
    if not root.exists():
        console.print(f"[red]Root path not found: {root}[/red]")
        raise typer.Exit(code=1)

    if not config.check_only:
        try:
            check_version_control(root, config.check_options())
        except VCSError as exc:
            _fail(exc)
        if not config.unattended:
            typer.confirm(f"Update dates of documents under {root}?", abort=True)

    try:
        stats = run(config, base_dir=Path.cwd())
    except DocChronoError as exc:
        _fail(exc)

    _print_stats(stats, config.check_only)
    if stats.errors:
        console.print(f"[red]Got {stats.errors} errors[/red]")
        raise typer.Exit(code=1)
    if config.check_only and stats.changed:
        console.print(f"[yellow]{stats.changed} files would be changed[/yellow]")
        raise typer.Exit(code=2)
