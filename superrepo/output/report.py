"""Per-repository status lines.

A status line has three columns:

    parser           updated      main(1a2b3c4) -> main(5d6e7f8)

The repository name is padded (or cut) to a fixed width, the status label is
padded to a fixed width, and the remark follows. Each column has its own
style. Lines are written one call at a time, as soon as a repository's task
finishes; they are never buffered or reordered.
"""

from __future__ import annotations

from dataclasses import dataclass

from superrepo.core.config import DEFAULT_NAME_WIDTH, DEFAULT_STATUS_WIDTH, OutputConfig
from superrepo.output.console import ConsoleProtocol, Segment, Style

__all__ = [
    "ColumnLayout",
    "fit",
    "format_status_segments",
    "print_status_line",
]

_COLUMN_GAP = " "
_REMARK_GAP = "   "


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    """Column widths of a status line."""

    name_width: int = DEFAULT_NAME_WIDTH
    status_width: int = DEFAULT_STATUS_WIDTH

    @classmethod
    def from_config(cls, output: OutputConfig) -> ColumnLayout:
        return cls(name_width=output.name_width, status_width=output.status_width)


def fit(text: str, width: int) -> str:
    """Pad ``text`` with spaces, or cut it, to exactly ``width`` characters."""
    return text[:width].ljust(width)


def format_status_segments(
    name: str,
    label: str,
    remark: str,
    layout: ColumnLayout | None = None,
) -> list[Segment]:
    """Styled parts of one status line."""
    layout = layout or ColumnLayout()
    return [
        (fit(name, layout.name_width) + _COLUMN_GAP, Style.REPO),
        (fit(label, layout.status_width) + _COLUMN_GAP, Style.STATUS),
        (_REMARK_GAP + remark, Style.REMARK),
    ]


def print_status_line(
    console: ConsoleProtocol,
    name: str,
    label: str,
    remark: str,
    layout: ColumnLayout | None = None,
    body: str = "",
) -> None:
    """Write one status line, followed by ``body`` (captured output) if given.

    Line and body go out in a single console call so that parallel tasks
    never split them.
    """
    console.segments(format_status_segments(name, label, remark, layout), body)
