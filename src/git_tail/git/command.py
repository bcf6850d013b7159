"""Run git subcommands with separately captured output streams.

git-tail runs a lot of external git commands. :class:`CommandGateway`
wraps them in one structure that builds the command line from positional
arguments and an options map, captures stdout and stderr, and turns a
nonzero exit into a :class:`~git_tail.exceptions.CommandError`.
"""

import os
import shlex
import subprocess
import threading
from dataclasses import dataclass
from typing import IO, Any, Mapping, Optional, Sequence

from ..exceptions import CommandError
from ..logging_config import get_logger
from ..output import Output

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one finished git process."""

    stdout: str
    stderr: str
    status: int

    @property
    def text(self) -> str:
        """stdout without its trailing newline."""
        return self.stdout.rstrip("\n")


def format_options(options: Optional[Mapping[str, Any]]) -> list[str]:
    """Translate an options map into git flag syntax.

    ``True`` gives ``--flag``, ``False`` or ``None`` gives ``--no-flag``,
    a list or tuple repeats the flag once per element, and any other value
    gives ``--flag=value``. Underscores in keys become dashes.

    >>> format_options({"list": True, "color": False, "format": "raw"})
    ['--list', '--no-color', '--format=raw']
    """
    flags: list[str] = []
    for key, value in (options or {}).items():
        name = key.replace("_", "-")
        if value is True:
            flags.append(f"--{name}")
        elif value is False or value is None:
            flags.append(f"--no-{name}")
        elif isinstance(value, (list, tuple)):
            flags.extend(f"--{name}={item}" for item in value)
        else:
            flags.append(f"--{name}={value}")
    return flags


class CommandGateway:
    """Executes single git operations against one repository.

    Args:
        repo_path: Working directory for every command (None = current)
        output: Renderer used to echo commands when verbose
        git_binary: Executable to invoke
    """

    def __init__(
        self,
        repo_path: Optional[str] = None,
        output: Optional[Output] = None,
        git_binary: str = "git",
    ):
        self.repo_path = repo_path
        self.output = output or Output()
        self.git_binary = git_binary

    def command_line(
        self,
        command: str,
        args: Sequence[str] = (),
        options: Optional[Mapping[str, Any]] = None,
    ) -> list[str]:
        """Full argv: git, the subcommand words, the flags, then the args."""
        return [self.git_binary, *command.split(), *format_options(options), *args]

    def execute(
        self,
        command: str,
        args: Sequence[str] = (),
        options: Optional[Mapping[str, Any]] = None,
        env: Optional[Mapping[str, str]] = None,
        check: bool = True,
    ) -> CommandResult:
        """Run ``git <command>`` and wait for it to finish.

        Args:
            command: Subcommand, possibly several words (``"reflog expire"``)
            args: Positional arguments, appended after the flags
            options: Flags, see :func:`format_options`
            env: Variables merged over the inherited environment
            check: Raise on a nonzero exit status

        Returns:
            The captured streams and exit status.

        Raises:
            CommandError: On nonzero exit when ``check`` is true.
        """
        argv = self.command_line(command, args, options)
        display = shlex.join(argv)
        verbose = self.output.verbose

        logger.debug("Running %s", display)
        if verbose:
            self.output.out(display, category="cmdline", indent=2)

        process_env = None
        if env:
            process_env = dict(os.environ)
            process_env.update(env)

        process = subprocess.Popen(
            argv,
            cwd=self.repo_path,
            env=process_env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )

        out_lines: list[str] = []
        err_lines: list[str] = []
        drains = [
            threading.Thread(
                target=self._drain, args=(process.stdout, out_lines, "cmdout"), daemon=True
            ),
            threading.Thread(
                target=self._drain, args=(process.stderr, err_lines, "cmderr"), daemon=True
            ),
        ]
        for thread in drains:
            thread.start()

        status = process.wait()
        for thread in drains:
            thread.join()

        if verbose:
            self.output.out(None)

        result = CommandResult(stdout="".join(out_lines), stderr="".join(err_lines), status=status)
        logger.debug("%s exited with status %d", display, status)

        if check and status != 0:
            raise CommandError(display, result.stderr, status)
        return result

    def _drain(self, stream: IO[str], sink: list, category: str) -> None:
        try:
            for line in iter(stream.readline, ""):
                sink.append(line)
                if self.output.verbose:
                    self.output.out(line.rstrip("\n"), category=category, indent=2)
        finally:
            stream.close()
