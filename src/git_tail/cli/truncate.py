"""Main truncation command."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import CommandError, GitTailError
from ..logging_config import setup_logging
from ..output import Output
from ..tail.runner import Runner
from . import app
from ._common import console, resolve_config


@app.command()
def main(
    since: Optional[str] = typer.Argument(
        None,
        help="Cutoff date; anything `git log --since` accepts (e.g. '2 years ago', 2020-01-01)",
        show_default=False,
    ),
    branches: Optional[list[str]] = typer.Option(
        None,
        "-b",
        "--branch",
        help="Branch to truncate (repeatable; default: all local branches)",
        show_default=False,
    ),
    alias_hashes: bool = typer.Option(
        False,
        "--alias-hashes",
        help="Make old commit hashes resolve to their rewritten commits",
    ),
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Repository to operate on (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show every git command and its output",
    ),
    color: Optional[bool] = typer.Option(
        None,
        "--color/--no-color",
        help="Force colored output on or off (default: detect terminal)",
        show_default=False,
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
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append diagnostic logs to this file",
        hidden=True,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Truncate history older than SINCE into a single new root commit.

    The newest commit before the cutoff is replaced by a parentless commit
    with the same tree, message and authorship; later history is rewritten
    on top of it and unreachable objects are pruned.

    [bold red]This rewrites history.[/bold red] Work on a fresh clone.

    [bold cyan]Examples:[/bold cyan]

      git-tail "2 years ago"

      git-tail 2020-01-01 -b main -b develop

      git-tail "6 months ago" --alias-hashes --verbose
    """
    from .. import __version__

    if version:
        console.print(f"[bold cyan]git-tail[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    logger = setup_logging(
        verbose=verbose, color=color, log_file=str(log_file) if log_file else None
    )
    output = Output()

    try:
        settings = resolve_config(
            since=since,
            branches=branches,
            alias_hashes=alias_hashes,
            path=path,
            verbose=verbose,
            color=color,
            config=config,
        )
        output = Output(settings.output)
        Runner(settings, output=output).run()

    except typer.Exit:
        raise

    except CommandError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        output.err(f"Command `{e.command}` failed with status {e.status}:")
        output.err(e.stderr.rstrip() or "(no error output)", category="cmderr", indent=2)
        raise typer.Exit(e.status)

    except GitTailError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        output.err(f"Error: {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Truncation interrupted by user")
        output.err("Interrupted. Check refs/replace/ and refs/original/ before re-running.")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during truncation")
        output.err(f"Unexpected error: {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
