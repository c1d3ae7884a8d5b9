"""Main scoring command."""

from pathlib import Path
from typing import Optional

import click
import typer
from rich.markup import escape

from ..api import analyze_repo
from ..config import RENAME_POLICIES
from ..exceptions import FrecenfileError
from ..formatting import entries_to_json, render_lines
from ..history import SortDirection
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


@app.command()
def score(
    repo: Path = typer.Option(
        Path("."),
        "-D",
        "--repo",
        metavar="REPO",
        help="Path to the Git repository (defaults to current directory)",
    ),
    paths: Optional[list[str]] = typer.Option(
        None,
        "-p",
        "--paths",
        metavar="PATH",
        help="Repository-relative path to include (repeatable); omit to include all files",
    ),
    max_commits: Optional[int] = typer.Option(
        None,
        "-n",
        "--max-commits",
        metavar="N",
        help="Maximum number of commits to inspect, newest first (default 3000; 0 = no limit)",
        min=0,
    ),
    ascending: bool = typer.Option(
        False,
        "-a",
        "--ascending",
        help="Sort ascending (lowest score first)",
    ),
    descending: bool = typer.Option(
        False,
        "-d",
        "--descending",
        help="Sort descending (highest score first)",
    ),
    path_only: bool = typer.Option(
        False,
        "-P",
        "--path-only",
        help="Print only paths, omit scores",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    half_life: Optional[float] = typer.Option(
        None,
        "--half-life",
        help="Decay constant in commits (default 500)",
    ),
    rename_policy: Optional[str] = typer.Option(
        None,
        "--rename-policy",
        help="Credit renames to both names or the new name only",
        click_type=click.Choice(list(RENAME_POLICIES), case_sensitive=False),
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Rank files by how often and how recently they changed.

    Each commit in the window adds exp(-rank / half_life) to every file it
    touched, where rank 0 is the newest commit.

    [bold cyan]Examples:[/bold cyan]

      frecenfile

      frecenfile -p src -p docs --path-only

      frecenfile -D /path/to/repo -n 0 --ascending
    """
    from .. import __version__

    if version:
        print(f"frecenfile {__version__}")
        raise typer.Exit(0)

    if ascending and descending:
        console.print("[red]Error:[/red] --ascending and --descending cannot be used together")
        raise typer.Exit(1)

    if verbose and quiet:
        console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    logger = setup_logging(verbose=verbose, quiet=quiet)
    direction = SortDirection.ASCENDING if ascending else SortDirection.DESCENDING

    try:
        settings = resolve_config(
            config=config,
            max_commits=max_commits,
            half_life=half_life,
            rename_policy=rename_policy.lower() if rename_policy else None,
        )
        entries = analyze_repo(repo, paths=paths or None, direction=direction, config=settings)

    except FrecenfileError as e:
        logger.debug("%s: %s", e.__class__.__name__, e)
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)

    if json_output:
        print(entries_to_json(entries))
    else:
        for line in render_lines(entries, path_only=path_only):
            print(line)
