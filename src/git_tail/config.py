"""Configuration loading and management for git-tail.

Configuration sources are merged in priority order:
    1. Defaults (defined in TailConfig)
    2. Global config (~/.git-tail.toml)
    3. Project config (./git-tail.toml)
    4. Explicit config file
    5. Environment variables (GIT_TAIL_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(since="2 years ago", alias_hashes=True)
    >>> config.alias_hashes
    True
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .output import OutputConfig

ENV_PREFIX = "GIT_TAIL_"
CONFIG_FILENAME = "git-tail.toml"


@dataclass(frozen=True)
class TailConfig:
    """Settings for one truncation run.

    Attributes:
        since: Cutoff; any date expression ``git rev-parse --since`` accepts
        branches: Branches to truncate (empty = all local branches)
        alias_hashes: Register old->new replace refs for rewritten commits
        verbose: Echo every git command and its output
        color: Force colour on/off (None = detect terminal)
        repo_path: Repository to operate on (None = current directory)
        git_binary: git executable
    """

    since: str = ""
    branches: list[str] = field(default_factory=list)
    alias_hashes: bool = False
    verbose: bool = False
    color: Optional[bool] = None
    repo_path: Optional[str] = None
    git_binary: str = "git"

    def __post_init__(self) -> None:
        if not self.since or not self.since.strip():
            raise ValueError("since must be a non-empty date expression")
        if not self.git_binary:
            raise ValueError("git_binary must not be empty")
        if any(not branch or not branch.strip() for branch in self.branches):
            raise ValueError("branch names must not be empty")
        if self.repo_path is not None and not Path(self.repo_path).is_dir():
            raise ValueError(f"repo_path is not a directory: {self.repo_path}")

    @property
    def output(self) -> OutputConfig:
        return OutputConfig(verbose=self.verbose, color=self.color)


def load_config(config_file: Optional[Path] = None, **overrides) -> TailConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); None
            values are ignored

    Returns:
        Validated TailConfig instance

    Raises:
        ConfigurationError: If a config file, environment variable or value
            is invalid
    """
    merged: dict = {}

    global_config = Path.home() / f".{CONFIG_FILENAME}"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())
    merged.update({key: value for key, value in overrides.items() if value is not None})

    if isinstance(merged.get("branches"), str):
        merged["branches"] = _split_list(merged["branches"])

    try:
        return TailConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from GIT_TAIL_* environment variables.

    Supported environment variables:
        GIT_TAIL_SINCE: str
        GIT_TAIL_BRANCHES: comma-separated list
        GIT_TAIL_ALIAS_HASHES: bool (true/false/1/0)
        GIT_TAIL_VERBOSE: bool
        GIT_TAIL_COLOR: bool
        GIT_TAIL_REPO_PATH: str
        GIT_TAIL_GIT_BINARY: str
    """
    type_hints = get_type_hints(TailConfig)
    result: dict[str, Any] = {}

    for field_name in TailConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        result[field_name] = _parse_env_value(env_value, type_hints[field_name], env_key)

    return result


def _parse_env_value(value: str, type_hint: Any, env_key: str) -> Any:
    """Parse an environment variable string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        type_hint = next(t for t in args if t is not type(None))

    if type_hint is bool:
        lower = value.strip().lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise InvalidConfigError(env_key, value, "expected true/false")

    if getattr(type_hint, "__origin__", None) is list:
        return _split_list(value)

    return value


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _load_toml_file(path: Path) -> dict:
    """Load a TOML config file.

    Raises:
        ConfigurationError: If the file cannot be parsed
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    # Allow settings either at the top level or under a [git-tail] table
    return dict(data.get("git-tail", data))
