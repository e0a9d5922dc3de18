"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
    configure_logging,
)
from .report import ColumnLayout, format_status_segments, print_status_line

__all__ = [
    "ColumnLayout",
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "configure_logging",
    "format_status_segments",
    "print_status_line",
]
