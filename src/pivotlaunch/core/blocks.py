"""Document block model.

Block-level content produced by the section builders and consumed by the
serializers. Blocks are immutable and carry no cross-references: the order
of the sequence is the only relationship between them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"


# Palette
COLOR_TITLE = "2E3440"
COLOR_SUBTITLE = "5E6470"
COLOR_PIVOT = "D73502"
COLOR_LAUNCH = "0066CC"
COLOR_WARNING = "8B5A2B"

# Indent of bulleted and key/value lines, in points
INDENT_PT = 18


@dataclass(frozen=True)
class TextRun:
    """A span of text with uniform styling.

    color is a 6-digit hex RGB string; size is in points.
    """

    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: str | None = None
    size: float | None = None


@dataclass(frozen=True)
class Heading:
    """A heading. Level 0 is the document title."""

    level: int
    text: str
    color: str | None = None
    size: float | None = None
    underline: bool = False
    align: Align = Align.LEFT


@dataclass(frozen=True)
class Paragraph:
    runs: tuple[TextRun, ...]
    indent: float = 0
    align: Align = Align.LEFT
    space_after: float | None = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class TableCell:
    runs: tuple[TextRun, ...]

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class Table:
    """A table; the first row is the header row.

    column_widths are percentages of the page width, one per column.
    """

    rows: tuple[tuple[TableCell, ...], ...]
    column_widths: tuple[int, ...] = field(default_factory=tuple)

    @property
    def header(self) -> tuple[TableCell, ...]:
        return self.rows[0] if self.rows else ()

    @property
    def body(self) -> tuple[tuple[TableCell, ...], ...]:
        return self.rows[1:]


@dataclass(frozen=True)
class PageBreak:
    pass


DocumentBlock = Union[Heading, Paragraph, Table, PageBreak]


# =============================================================================
# CONSTRUCTORS
# =============================================================================


def heading(level: int, text: str, **style) -> Heading:
    return Heading(level=level, text=text, **style)


def paragraph(*runs: TextRun, **layout) -> Paragraph:
    return Paragraph(runs=tuple(runs), **layout)


def text_paragraph(text: str, **layout) -> Paragraph:
    return Paragraph(runs=(TextRun(text),), **layout)


def key_value(label: str, value: str, **layout) -> Paragraph:
    """A "Label: value" line with a bold label."""
    return Paragraph(runs=(TextRun(f"{label}: ", bold=True), TextRun(value)), **layout)


def bullet(text: str, **style) -> Paragraph:
    """An indented bullet line; style applies to the run."""
    return Paragraph(runs=(TextRun(f"• {text}", **style),), indent=INDENT_PT)


def cell(text: str, bold: bool = False) -> TableCell:
    return TableCell(runs=(TextRun(text, bold=bold),))


# =============================================================================
# VALIDATION
# =============================================================================

MAX_HEADING_LEVEL = 3

_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")

# Control characters XML 1.0 does not allow (tab, LF and CR are allowed)
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


class SerializationError(Exception):
    """Raised when a block cannot be encoded."""

    def __init__(self, message: str, block: object | None = None):
        self.block = block
        super().__init__(message)


def validate_align(value: object, block: object | None = None) -> Align:
    """Return the Align member for a value, or raise SerializationError."""
    try:
        return Align(value)
    except ValueError:
        raise SerializationError(f"Invalid alignment: {value!r}", block) from None


def validate_run(run: TextRun) -> None:
    """Check a run can be encoded losslessly.

    Raises:
        SerializationError: On non-string text, control characters, bad
            color or size.
    """
    if not isinstance(run.text, str):
        raise SerializationError(f"Run text must be str, got {type(run.text).__name__}", run)
    illegal = _XML_ILLEGAL.search(run.text)
    if illegal:
        raise SerializationError(
            f"Text contains control character {illegal.group()!r} at offset {illegal.start()}",
            run,
        )
    if run.color is not None and not _HEX_COLOR.match(str(run.color)):
        raise SerializationError(f"Invalid run color: {run.color!r}", run)
    if run.size is not None and not (0 < run.size <= 1638):
        raise SerializationError(f"Invalid run size: {run.size!r}", run)


def validate_heading(block: Heading) -> None:
    if not 0 <= block.level <= MAX_HEADING_LEVEL:
        raise SerializationError(f"Invalid heading level: {block.level}", block)
    validate_align(block.align, block)
    validate_run(TextRun(block.text, color=block.color, size=block.size))


def validate_paragraph(block: Paragraph) -> None:
    validate_align(block.align, block)
    for run in block.runs:
        validate_run(run)


def validate_table(block: Table) -> None:
    if not block.rows:
        raise SerializationError("Table has no rows", block)
    width = len(block.rows[0])
    if any(len(row) != width for row in block.rows):
        raise SerializationError("Table rows have different lengths", block)
    if block.column_widths and len(block.column_widths) != width:
        raise SerializationError("Column widths do not match column count", block)
    for row in block.rows:
        for table_cell in row:
            for run in table_cell.runs:
                validate_run(run)
