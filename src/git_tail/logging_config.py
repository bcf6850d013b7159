"""
Diagnostic logging for git-tail.

Log records are internal detail (window sizes, branch lists, unexpected
failures). They go to stderr through a rich handler that obeys the same
colour switch as :class:`git_tail.output.Output`; the operator's progress
lines never pass through here.
"""

import logging
from typing import Optional

from rich.logging import RichHandler

from .output import build_console

ROOT_LOGGER = "git_tail"

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False, color: Optional[bool] = None, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route git_tail log records to stderr and, optionally, a file.

    Calling it again replaces the previous handlers.

    Args:
        verbose: Log DEBUG records and show source paths; otherwise WARNING and up
        color: Colour switch for the stderr handler (None detects the terminal)
        log_file: Also append every DEBUG-and-up record to this file

    Returns:
        The git_tail root logger
    """
    level = logging.DEBUG if verbose else logging.WARNING

    stderr_handler = RichHandler(
        console=build_console(color, stderr=True),
        level=level,
        markup=False,
        rich_tracebacks=True,
        show_path=verbose,
    )
    handlers: list[logging.Handler] = [stderr_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if log_file else level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the git_tail hierarchy; bare names are prefixed."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
