"""CLI entry point: registers the command."""

import typer

app = typer.Typer(
    name="git-tail",
    help="git-tail - Truncate git history before a cutoff date",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import the command module to register it
from .truncate import main as _main  # noqa: F401, E402
