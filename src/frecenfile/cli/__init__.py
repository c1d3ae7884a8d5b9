"""CLI entry point."""

import typer

app = typer.Typer(
    name="frecenfile",
    help="Compute frecency scores for files in a Git repository",
    add_completion=False,
    rich_markup_mode="rich",
)

# Import the command module to register it
from .score import score as _score  # noqa: F401, E402


def main() -> None:
    app()
