"""Exception hierarchy for git-tail."""

from .base import GitTailError
from .command import CommandError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "GitTailError",
    "CommandError",
    "ConfigurationError",
    "InvalidConfigError",
]
