"""HTML serializer for Word-importable and print-to-PDF exports.

Blocks are validated, reduced to plain view data and rendered through the
Jinja2 templates in ``html_templates/`` with autoescaping on.

Heading level N renders as <h{N+1}> (the title is <h1>). Page breaks are
explicit <div class="page-break"> elements so print engines paginate at the
same positions as the .docx export.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape

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

HTML_CONTENT_TYPE = "text/html; charset=utf-8"

TEMPLATE_DIR = Path(__file__).parent / "html_templates"

BASE_CSS = """
body { font-family: Calibri, Arial, sans-serif; font-size: 11pt; line-height: 1.4; }
h1.title { text-align: center; }
table.rubric { border-collapse: collapse; width: 100%; }
table.rubric th, table.rubric td { border: 1px solid #000000; padding: 4pt; vertical-align: top; }
div.page-break { page-break-after: always; break-after: page; }
"""

PRINT_CSS = """
@page { size: A4; margin: 2cm; }
@media print { body { -webkit-print-color-adjust: exact; print-color-adjust: exact; } }
"""

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def _run_view(run: TextRun) -> dict[str, Any]:
    validate_run(run)
    styles = []
    if run.bold:
        styles.append("font-weight: bold")
    if run.italic:
        styles.append("font-style: italic")
    if run.underline:
        styles.append("text-decoration: underline")
    if run.color:
        styles.append(f"color: #{run.color.upper()}")
    if run.size:
        styles.append(f"font-size: {run.size:g}pt")
    return {"text": run.text, "style": "; ".join(styles)}


def _paragraph_style(indent: float, align: Align) -> str:
    styles = []
    if indent:
        styles.append(f"margin-left: {indent:g}pt")
    if align is Align.CENTER:
        styles.append("text-align: center")
    return "; ".join(styles)


def _block_html(block: DocumentBlock) -> str:
    if isinstance(block, Heading):
        validate_heading(block)
        run = TextRun(block.text, underline=block.underline, color=block.color, size=block.size)
        return _env.get_template("heading.html").render(
            tag_level=block.level + 1,
            is_title=block.level == 0,
            style=_paragraph_style(0, validate_align(block.align, block)),
            items=[_run_view(run)],
        )
    if isinstance(block, Paragraph):
        validate_paragraph(block)
        return _env.get_template("paragraph.html").render(
            style=_paragraph_style(block.indent, validate_align(block.align, block)),
            items=[_run_view(run) for run in block.runs],
        )
    if isinstance(block, Table):
        validate_table(block)
        header = [
            {
                "width": block.column_widths[i] if block.column_widths else None,
                "runs": [_run_view(r) for r in head.runs],
            }
            for i, head in enumerate(block.header)
        ]
        rows = [[[_run_view(r) for r in c.runs] for c in row] for row in block.body]
        return _env.get_template("table.html").render(header=header, rows=rows)
    if isinstance(block, PageBreak):
        return _env.get_template("page_break.html").render()
    raise SerializationError(f"Unknown block type: {type(block).__name__}", block)


def render_body(blocks: Iterable[DocumentBlock]) -> str:
    """Render blocks to HTML body markup.

    Raises:
        SerializationError: If a block carries invalid data.
    """
    return "\n".join(_block_html(block) for block in blocks)


def wrap_document(body: str, title: str, for_print: bool = False) -> str:
    """Wrap rendered body markup in a standalone HTML document."""
    css = BASE_CSS + (PRINT_CSS if for_print else "")
    return _env.get_template("document.html").render(title=title, css=css, body=body) + "\n"


def render_html(
    blocks: Iterable[DocumentBlock],
    title: str,
    for_print: bool = False,
) -> str:
    """Render blocks to a standalone HTML document."""
    return wrap_document(render_body(blocks), title, for_print=for_print)


def serialize_html(
    blocks: Iterable[DocumentBlock],
    title: str,
    for_print: bool = False,
) -> bytes:
    return render_html(blocks, title, for_print=for_print).encode("utf-8")
