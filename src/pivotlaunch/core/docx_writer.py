"""Word (.docx) serializer.

Encodes a block sequence with python-docx. Output is byte-deterministic:
core properties are pinned and the OOXML package is re-zipped with a fixed
member timestamp, so identical blocks always give identical bytes.
"""

from __future__ import annotations

import io
import zipfile
from datetime import datetime
from typing import Iterable

import structlog
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor
from docx.text.paragraph import Paragraph as DocxParagraph

from pivotlaunch.core.blocks import (
    Align,
    DocumentBlock,
    Heading,
    PageBreak,
    Paragraph,
    SerializationError,
    Table,
    TextRun,
    validate_align,
    validate_heading,
    validate_paragraph,
    validate_run,
    validate_table,
)

logger = structlog.get_logger(__name__)

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

DEFAULT_AUTHOR = "Pivot-and-Launch PBL Toolkit"
DEFAULT_TITLE = "Pivot-and-Launch Project-Based Learning Guide"

# Fixed package timestamps
CORE_PROPERTIES_TIMESTAMP = datetime(2024, 1, 1, 0, 0, 0)
ZIP_TIMESTAMP = (2024, 1, 1, 0, 0, 0)

TABLE_STYLE = "Table Grid"
TEXT_WIDTH_INCHES = 6.5

_ALIGNMENT = {
    Align.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Align.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
}


class DocxWriter:
    """Accumulates blocks into a python-docx Document."""

    def __init__(self, title: str = DEFAULT_TITLE, author: str = DEFAULT_AUTHOR):
        self.document = Document()
        props = self.document.core_properties
        props.title = title
        props.author = author
        props.last_modified_by = author
        props.created = CORE_PROPERTIES_TIMESTAMP
        props.modified = CORE_PROPERTIES_TIMESTAMP
        props.revision = 1
        self.blocks_written = 0

    def add_blocks(self, blocks: Iterable[DocumentBlock]) -> None:
        """Append blocks in order.

        Raises:
            SerializationError: If a block carries invalid data.
        """
        for block in blocks:
            self.add_block(block)

    def add_block(self, block: DocumentBlock) -> None:
        """Append one block.

        Raises:
            SerializationError: If the block is invalid or python-docx
                rejects its content.
        """
        try:
            if isinstance(block, Heading):
                self._add_heading(block)
            elif isinstance(block, Paragraph):
                self._add_paragraph(block)
            elif isinstance(block, Table):
                self._add_table(block)
            elif isinstance(block, PageBreak):
                self.document.add_page_break()
            else:
                raise SerializationError(f"Unknown block type: {type(block).__name__}", block)
        except ValueError as e:
            raise SerializationError(f"python-docx rejected block: {e}", block) from e
        self.blocks_written += 1

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.document.save(buffer)
        return _repack(buffer.getvalue())

    # -------------------------------------------------------------------------

    def _add_heading(self, block: Heading) -> None:
        validate_heading(block)
        para = self.document.add_heading(level=block.level)
        _style_run(
            para.add_run(block.text),
            TextRun(block.text, bold=True, underline=block.underline, color=block.color, size=block.size),
        )
        para.alignment = _ALIGNMENT[validate_align(block.align, block)]

    def _add_paragraph(self, block: Paragraph) -> None:
        validate_paragraph(block)
        para = self.document.add_paragraph()
        _write_runs(para, block.runs)
        fmt = para.paragraph_format
        if block.indent:
            fmt.left_indent = Pt(block.indent)
        if block.space_after is not None:
            fmt.space_after = Pt(block.space_after)
        para.alignment = _ALIGNMENT[validate_align(block.align, block)]

    def _add_table(self, block: Table) -> None:
        validate_table(block)
        columns = len(block.rows[0])
        table = self.document.add_table(rows=len(block.rows), cols=columns)
        table.style = TABLE_STYLE
        for row_idx, row in enumerate(block.rows):
            docx_cells = table.rows[row_idx].cells
            for col_idx, source in enumerate(row):
                target = docx_cells[col_idx]
                _write_runs(target.paragraphs[0], source.runs)
                if block.column_widths:
                    target.width = Inches(TEXT_WIDTH_INCHES * block.column_widths[col_idx] / 100)


def _write_runs(para: DocxParagraph, runs: Iterable[TextRun]) -> None:
    for run in runs:
        validate_run(run)
        _style_run(para.add_run(run.text), run)


def _style_run(docx_run, run: TextRun) -> None:
    if run.bold:
        docx_run.bold = True
    if run.italic:
        docx_run.italic = True
    if run.underline:
        docx_run.underline = True
    if run.color:
        docx_run.font.color.rgb = RGBColor.from_string(run.color.upper())
    if run.size:
        docx_run.font.size = Pt(run.size)


def _repack(package: bytes) -> bytes:
    """Rewrite the zip container with fixed member timestamps."""
    source = zipfile.ZipFile(io.BytesIO(package))
    output = io.BytesIO()
    with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            member = zipfile.ZipInfo(info.filename, date_time=ZIP_TIMESTAMP)
            member.compress_type = zipfile.ZIP_DEFLATED
            member.external_attr = 0o644 << 16
            target.writestr(member, source.read(info.filename))
    return output.getvalue()


def serialize_docx(blocks: Iterable[DocumentBlock], title: str = DEFAULT_TITLE) -> bytes:
    """Encode blocks as a .docx package.

    Raises:
        SerializationError: If a block carries invalid data.
    """
    writer = DocxWriter(title=title)
    writer.add_blocks(blocks)
    data = writer.to_bytes()
    logger.debug("docx_serialized", blocks=writer.blocks_written, size=len(data))
    return data
