"""Export coordinator.

Fetches the requested templates from a store, runs them through the
resolve/build/assemble pipeline and serializes the result in one of the
supported formats.

Usage:
    from pivotlaunch.core.exporter import export_templates

    result = export_templates([3, 1], "docx", store)
    Path(result.filename).write_bytes(result.payload)
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence
from urllib.parse import quote

import structlog

from pivotlaunch.config.app_config import AppConfig, load_app_config
from pivotlaunch.core.assembler import TemplateSection, assemble_sections
from pivotlaunch.core.blocks import PageBreak, SerializationError
from pivotlaunch.core.docx_writer import DOCX_CONTENT_TYPE, DocxWriter
from pivotlaunch.core.flat_export import (
    CSV_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    serialize_csv,
    serialize_json,
)
from pivotlaunch.core.html_writer import HTML_CONTENT_TYPE, render_body, wrap_document
from pivotlaunch.core.models import TemplateRecord
from pivotlaunch.core.overlays import OverlayRegistry, builtin_registry, load_overlays

logger = structlog.get_logger(__name__)


# =============================================================================
# FORMATS
# =============================================================================


class ExportFormat(str, Enum):
    """Supported export encodings."""

    DOCX = "docx"
    WORD_HTML = "word-html"
    PDF_HTML = "pdf-html"
    JSON = "json"
    CSV = "csv"

    @classmethod
    def parse(cls, value: str | ExportFormat) -> ExportFormat:
        """Parse a format tag, accepting the short aliases.

        Raises:
            UnsupportedFormatError: If the tag is unknown.
        """
        if isinstance(value, ExportFormat):
            return value
        tag = str(value).strip().lower()
        tag = FORMAT_ALIASES.get(tag, tag)
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedFormatError(str(value)) from None

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @property
    def is_document(self) -> bool:
        return self in (ExportFormat.DOCX, ExportFormat.WORD_HTML, ExportFormat.PDF_HTML)


FORMAT_ALIASES = {
    "word": "word-html",
    "html": "word-html",
    "pdf": "pdf-html",
}

_CONTENT_TYPES = {
    ExportFormat.DOCX: DOCX_CONTENT_TYPE,
    ExportFormat.WORD_HTML: HTML_CONTENT_TYPE,
    ExportFormat.PDF_HTML: HTML_CONTENT_TYPE,
    ExportFormat.JSON: JSON_CONTENT_TYPE,
    ExportFormat.CSV: CSV_CONTENT_TYPE,
}


# =============================================================================
# ERRORS
# =============================================================================


class ExportError(Exception):
    """Base class for export failures."""


class EmptyExportError(ExportError):
    """No template ids were supplied."""

    def __init__(self) -> None:
        super().__init__("No template ids supplied")


class UnsupportedFormatError(ExportError):
    """Requested format tag is not known."""

    def __init__(self, fmt: str):
        self.format = fmt
        supported = ", ".join(f.value for f in ExportFormat)
        super().__init__(f"Unsupported export format '{fmt}'. Use one of: {supported}")


class TemplateNotFoundError(ExportError):
    """One or more requested template ids do not exist in the store."""

    def __init__(self, missing_ids: Sequence[int]):
        self.missing_ids = list(missing_ids)
        ids = ", ".join(str(i) for i in self.missing_ids)
        super().__init__(f"Template(s) not found: {ids}")


class TemplateRenderError(ExportError):
    """A template's blocks could not be serialized."""

    def __init__(self, template_id: int, cause: Exception):
        self.template_id = template_id
        self.cause = cause
        super().__init__(f"Failed to render template {template_id}: {cause}")


# =============================================================================
# RESULT / COLLABORATORS
# =============================================================================


class TemplateStore(Protocol):
    """Anything that can fetch template records by id, preserving order."""

    def get_templates_by_ids(self, template_ids: Sequence[int]) -> list[TemplateRecord]:
        ...


_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class ExportResult:
    """Serialized export ready to be written or downloaded."""

    payload: bytes
    filename: str
    content_type: str
    template_ids: tuple[int, ...] = ()

    @property
    def content_disposition(self) -> str:
        """Attachment header value.

        Control characters are stripped. Names that are not plain ASCII get
        an ASCII fallback plus an RFC 5987 ``filename*`` parameter.
        """
        name = _CONTROL_CHARS.sub("", self.filename)
        fallback = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
        fallback = fallback.replace('"', "").replace("\\", "") or "download"
        if fallback == name:
            return f'attachment; filename="{fallback}"'
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


# =============================================================================
# PIPELINE
# =============================================================================


def _serialize_sections(
    sections: Sequence[TemplateSection],
    fmt: ExportFormat,
    title: str,
    author: str,
) -> bytes:
    """Encode assembled sections, attributing failures to their template."""
    if fmt is ExportFormat.DOCX:
        writer = DocxWriter(title=title, author=author)
        for i, section in enumerate(sections):
            try:
                if i > 0:
                    writer.add_block(PageBreak())
                writer.add_blocks(section.blocks)
            except SerializationError as e:
                raise TemplateRenderError(section.template_id, e) from e
        return writer.to_bytes()

    bodies = []
    for section in sections:
        try:
            bodies.append(render_body(section.blocks))
        except SerializationError as e:
            raise TemplateRenderError(section.template_id, e) from e
    body = "\n" + render_body([PageBreak()]) + "\n"
    html = wrap_document(body.join(bodies), title, for_print=fmt is ExportFormat.PDF_HTML)
    return html.encode("utf-8")


def render_document(
    templates: Sequence[TemplateRecord | Mapping[str, Any]],
    fmt: ExportFormat | str = ExportFormat.DOCX,
    overlays: OverlayRegistry | Mapping[str, Any] | None = None,
    title: str | None = None,
    author: str | None = None,
) -> bytes:
    """Render already-fetched templates to bytes.

    Pure: no store access and no file I/O. Without overlays the built-in
    registry is used.

    Raises:
        UnsupportedFormatError: If the format tag is unknown.
        TemplateRenderError: If a template's blocks fail to serialize.
    """
    fmt = ExportFormat.parse(fmt)
    records = [
        t if isinstance(t, TemplateRecord) else TemplateRecord.from_mapping(t)
        for t in templates
    ]

    if fmt is ExportFormat.JSON:
        return serialize_json(records)
    if fmt is ExportFormat.CSV:
        return serialize_csv(records)

    export_config = load_app_config().export
    if overlays is None:
        overlays = builtin_registry()
    sections = assemble_sections(records, overlays)
    return _serialize_sections(
        sections,
        fmt,
        title=title or export_config.document_title,
        author=author or export_config.author,
    )


def export_templates(
    template_ids: Sequence[int],
    fmt: ExportFormat | str | None,
    store: TemplateStore,
    overlays: OverlayRegistry | Mapping[str, Any] | None = None,
    filename: str | None = None,
    config: AppConfig | None = None,
) -> ExportResult:
    """Export the given templates, in caller order, as one payload.

    Args:
        template_ids: Ordered ids. Repeats are rendered repeatedly.
        fmt: Format tag (docx, word-html, pdf-html, json, csv or an alias).
            None uses the configured default.
        store: Template store collaborator.
        overlays: Overlay registry. Defaults to the configured registry.
        filename: Download filename override.
        config: App config. Defaults to the cached config.

    Returns:
        ExportResult with payload, filename and content type.

    Raises:
        EmptyExportError: If no ids are given.
        UnsupportedFormatError: If the format tag is unknown.
        TemplateNotFoundError: If any id is missing from the store.
        TemplateRenderError: If serialization of a template fails.
    """
    config = config or load_app_config()
    export_format = ExportFormat.parse(fmt or config.export.default_format)

    ids = list(template_ids)
    if not ids:
        raise EmptyExportError()

    records = store.get_templates_by_ids(ids)
    found = {r.id for r in records}
    missing = [tid for tid in dict.fromkeys(ids) if tid not in found]
    if missing:
        logger.warning("export_templates_missing", missing_ids=missing)
        raise TemplateNotFoundError(missing)

    by_id = {r.id: r for r in records}
    ordered = [by_id[tid] for tid in ids]

    if overlays is None and export_format.is_document:
        overlays = load_overlays(config.overlays_file)

    logger.info("export_started", templates=len(ordered), format=export_format.value)

    payload = render_document(
        ordered,
        export_format,
        overlays=overlays,
        title=config.export.document_title,
        author=config.export.author,
    )

    result = ExportResult(
        payload=payload,
        filename=filename or config.export.filename_for(export_format.value),
        content_type=export_format.content_type,
        template_ids=tuple(ids),
    )
    logger.info(
        "export_completed",
        templates=len(ordered),
        format=export_format.value,
        size=len(payload),
        filename=result.filename,
    )
    return result
