"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import TailConfig, load_config

console = Console(stderr=True)


def resolve_config(
    since: Optional[str] = None,
    branches: Optional[list[str]] = None,
    alias_hashes: Optional[bool] = None,
    path: Optional[Path] = None,
    verbose: bool = False,
    color: Optional[bool] = None,
    config: Optional[Path] = None,
) -> TailConfig:
    """Build a TailConfig from CLI options.

    Only options the user actually gave override files and environment.
    """
    overrides: dict = {}
    if since is not None:
        overrides["since"] = since
    if branches:
        overrides["branches"] = list(branches)
    if alias_hashes:
        overrides["alias_hashes"] = True
    if path is not None:
        overrides["repo_path"] = str(path)
    if verbose:
        overrides["verbose"] = True
    if color is not None:
        overrides["color"] = color
    return load_config(config_file=config, **overrides)
