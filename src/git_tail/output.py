"""Categorized console output.

Every line shown to the operator has a category that selects its style:
``default`` for progress headlines, ``detail`` for per-branch notes, and
``cmdline`` / ``cmdout`` / ``cmderr`` for echoed git commands and their
streams. Standard output and standard error use separate style maps so
errors stay scannable on a terminal.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.text import Text

OUT_STYLES = {
    "default": "bold green",
    "detail": "white",
    "cmdline": "yellow",
    "cmdout": "white",
    "cmderr": "red",
}

ERR_STYLES = {
    "default": "bold red",
    "detail": "cyan",
    "cmdline": "yellow",
    "cmdout": "cyan",
    "cmderr": "red",
}


@dataclass(frozen=True)
class OutputConfig:
    """Rendering switches passed explicitly to everything that prints.

    Attributes:
        verbose: Echo git command lines and their captured output
        color: Force colour on (True) or off (False); None detects the terminal
    """

    verbose: bool = False
    color: Optional[bool] = None


def build_console(color: Optional[bool], stderr: bool) -> Console:
    """Console honouring the colour switch: None detects, True forces, False disables."""
    if color is None:
        return Console(stderr=stderr, highlight=False)
    if color:
        return Console(stderr=stderr, highlight=False, force_terminal=True)
    return Console(stderr=stderr, highlight=False, color_system=None)


class Output:
    """Sends categorized lines to stdout or stderr."""

    def __init__(
        self,
        config: Optional[OutputConfig] = None,
        stdout: Optional[Console] = None,
        stderr: Optional[Console] = None,
    ):
        self.config = config or OutputConfig()
        self.stdout = stdout or build_console(self.config.color, stderr=False)
        self.stderr = stderr or build_console(self.config.color, stderr=True)

    @property
    def verbose(self) -> bool:
        return self.config.verbose

    def out(self, *lines: Optional[str], category: str = "default", indent: int = 0) -> None:
        """Print lines to stdout in the given category.

        ``None`` or empty strings produce a blank line.
        """
        self._emit(self.stdout, OUT_STYLES, lines, category, indent)

    def err(self, *lines: Optional[str], category: str = "default", indent: int = 0) -> None:
        """Print lines to stderr in the given category."""
        self._emit(self.stderr, ERR_STYLES, lines, category, indent)

    def _emit(self, console: Console, styles: dict, lines, category: str, indent: int) -> None:
        if category not in styles:
            raise ValueError(f"Unknown output category: {category}")
        style = styles[category]
        prefix = " " * indent
        for line in lines:
            if not line:
                console.print()
                continue
            for part in str(line).splitlines():
                console.print(Text(prefix + part, style=style), soft_wrap=True)
