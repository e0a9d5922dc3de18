"""Console output abstraction.

Everything super shows the user goes through a ``ConsoleProtocol``. The
production implementation is backed by Rich; ``MockConsole`` records output
for tests. This is the only module that imports Rich.

Each method call produces whole lines in one write, so output from
concurrent repository tasks interleaves by line, never within a line.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "Segment",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
    "configure_logging",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    REPO = auto()  # Repository name column of a status line
    STATUS = auto()  # Status label column
    REMARK = auto()  # Free-text remark

    def __str__(self) -> str:
        return self.name.lower()


type Segment = tuple[str, Style]


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def segments(self, parts: Sequence[Segment], body: str = "") -> None:
        """Print one line made of differently styled parts.

        A non-empty ``body`` follows the line verbatim, in the same write.
        """
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


_RICH_STYLES: dict[Style, str] = {
    Style.DEFAULT: "",
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.REPO: "bold color(198)",  # neon pink
    Style.STATUS: "bold bright_cyan",
    Style.REMARK: "bold bright_white",
}


class RichConsole:
    """Console implementation using Rich."""

    def __init__(self, *, stderr: bool = False) -> None:
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = _RICH_STYLES.get(style, "")
        self._console.print(message, style=rich_style or None, markup=False)

    def segments(self, parts: Sequence[Segment], body: str = "") -> None:
        from rich.text import Text

        line = Text.assemble(*((text, _RICH_STYLES.get(style, "")) for text, style in parts))
        if body:
            line.append("\n" + body.rstrip("\n"))
        self._console.print(line, soft_wrap=True)

    def success(self, message: str) -> None:
        self._console.print(f"[green]OK[/green] {_escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[red bold]error:[/red bold] {_escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]warning:[/yellow] {_escape(message)}")

    def info(self, message: str) -> None:
        self._console.print(f"[cyan]info:[/cyan] {_escape(message)}")


def _escape(message: str) -> str:
    from rich.markup import escape

    return escape(message)


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr through Rich.

    WARNING and above by default, everything with ``verbose``.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(threadName)s %(message)s" if verbose else "%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style
    parts: tuple[Segment, ...] = ()
    body: str = ""


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing.

    Safe to share between the worker threads of a parallel run.
    """

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def _record(self, record: OutputRecord) -> None:
        with self._lock:
            self.outputs.append(record)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._record(OutputRecord(message, style))

    def segments(self, parts: Sequence[Segment], body: str = "") -> None:
        parts = tuple(parts)
        line = "".join(text for text, _ in parts)
        self._record(OutputRecord(line, Style.DEFAULT, parts, body.rstrip("\n")))

    def success(self, message: str) -> None:
        self._record(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self._record(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self._record(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self._record(OutputRecord(f"info: {message}", Style.INFO))

    # Test helper methods

    def clear(self) -> None:
        with self._lock:
            self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        """All output messages as a list of strings."""
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """All output as a single newline-separated string."""
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """All outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
