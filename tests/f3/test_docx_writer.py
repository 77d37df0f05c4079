"""Tests for the .docx serializer (F3)."""

import io
import zipfile

import pytest
from docx import Document

from pivotlaunch.core.blocks import (
    Heading,
    PageBreak,
    SerializationError,
    Table,
    TextRun,
    cell,
    paragraph,
)
from pivotlaunch.core.docx_writer import (
    CORE_PROPERTIES_TIMESTAMP,
    ZIP_TIMESTAMP,
    serialize_docx,
)


def _document_xml(data: bytes) -> str:
    with zipfile.ZipFile(io.BytesIO(data)) as package:
        return package.read("word/document.xml").decode("utf-8")


class TestDocxStructure:
    """Serialized documents read back with python-docx."""

    def test_title_paragraph(self, blocks):
        doc = Document(io.BytesIO(serialize_docx(blocks)))
        assert doc.paragraphs[0].text == "Blockchain Applications"
        assert doc.paragraphs[0].style.name == "Title"

    def test_heading_styles(self, blocks):
        doc = Document(io.BytesIO(serialize_docx(blocks)))
        styles = {p.text: p.style.name for p in doc.paragraphs}
        assert styles["Template Overview"] == "Heading 1"
        assert styles["Learning Objectives"] == "Heading 2"
        assert styles["Phase 1: Research"] == "Heading 3"

    def test_assessment_table(self, blocks):
        doc = Document(io.BytesIO(serialize_docx(blocks)))
        assert len(doc.tables) == 1
        table = doc.tables[0]
        assert len(table.rows) == 2
        assert table.rows[0].cells[0].text == "Criterion"
        assert table.rows[1].cells[0].text == "Conceptual Understanding"

    def test_page_break_count(self, blocks):
        """Two templates give exactly one page break."""
        xml = _document_xml(serialize_docx(blocks))
        assert xml.count('w:type="page"') == 1

    def test_run_styles(self):
        data = serialize_docx(
            [paragraph(TextRun("Warn", bold=True, italic=True, color="8B5A2B", size=12))]
        )
        run = Document(io.BytesIO(data)).paragraphs[0].runs[0]
        assert run.bold is True
        assert run.italic is True
        assert str(run.font.color.rgb) == "8B5A2B"
        assert run.font.size.pt == 12

    def test_core_properties_pinned(self, blocks):
        doc = Document(io.BytesIO(serialize_docx(blocks, title="Guide")))
        assert doc.core_properties.title == "Guide"
        assert doc.core_properties.created.replace(tzinfo=None) == CORE_PROPERTIES_TIMESTAMP


class TestDocxDeterminism:
    """Identical blocks give identical bytes."""

    def test_byte_identical(self, blocks):
        assert serialize_docx(blocks) == serialize_docx(blocks)

    def test_zip_timestamps_fixed(self, blocks):
        with zipfile.ZipFile(io.BytesIO(serialize_docx(blocks))) as package:
            assert {info.date_time for info in package.infolist()} == {ZIP_TIMESTAMP}

    def test_different_input_different_bytes(self, blocks):
        assert serialize_docx(blocks) != serialize_docx(blocks[:-1])


class TestDocxErrors:
    """Invalid block data raises SerializationError."""

    def test_bad_color(self):
        with pytest.raises(SerializationError):
            serialize_docx([paragraph(TextRun("x", color="red"))])

    def test_non_string_text(self):
        with pytest.raises(SerializationError):
            serialize_docx([paragraph(TextRun(42))])

    def test_heading_level_out_of_range(self):
        with pytest.raises(SerializationError):
            serialize_docx([Heading(level=7, text="Too deep")])

    def test_ragged_table(self):
        table = Table(rows=((cell("a"), cell("b")), (cell("c"),)))
        with pytest.raises(SerializationError):
            serialize_docx([table])

    def test_unknown_block(self):
        with pytest.raises(SerializationError):
            serialize_docx(["not a block"])

    def test_page_break_alone(self):
        xml = _document_xml(serialize_docx([PageBreak()]))
        assert 'w:type="page"' in xml

    def test_control_character_in_run(self):
        """A vertical tab pasted from Word cannot be stored in XML."""
        with pytest.raises(SerializationError):
            serialize_docx([paragraph(TextRun("line one\x0bline two"))])

    def test_control_character_in_heading(self):
        with pytest.raises(SerializationError):
            serialize_docx([Heading(level=1, text="Intro\x00")])

    def test_control_character_in_table_cell(self):
        table = Table(rows=((cell("a"),), (cell("b\x1f"),)))
        with pytest.raises(SerializationError):
            serialize_docx([table])

    def test_tab_and_newline_allowed(self):
        data = serialize_docx([paragraph(TextRun("a\tb\nc"))])
        assert data[:2] == b"PK"

    def test_unknown_alignment(self):
        with pytest.raises(SerializationError):
            serialize_docx([paragraph(TextRun("x"), align="justify")])
