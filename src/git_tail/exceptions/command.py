"""Errors raised by delegated git operations."""

from .base import GitTailError


class CommandError(GitTailError):
    """Raised when a git subcommand exits with a nonzero status.

    Attributes:
        command: Full command line as shown to the user
        stderr: Captured standard error text
        status: Process exit status
    """

    def __init__(self, command: str, stderr: str, status: int):
        super().__init__(
            f"Command `{command}` failed with status {status}",
            details={"status": str(status)},
        )
        self.command = command
        self.stderr = stderr
        self.status = status

    def __str__(self) -> str:
        if self.stderr.strip():
            return f"{self.message}: {self.stderr.strip()}"
        return self.message
