"""Thin layer over the git executable."""

from .command import CommandGateway, CommandResult, format_options
from .commit import Commit, Signature, parse_log
from .repository import GitRepository

__all__ = [
    "CommandGateway",
    "CommandResult",
    "format_options",
    "Commit",
    "Signature",
    "parse_log",
    "GitRepository",
]
