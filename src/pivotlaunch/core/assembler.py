"""Document assembler.

Concatenates the section output of each template in caller order and
separates successive templates with a page break.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import structlog

from pivotlaunch.core.blocks import DocumentBlock, PageBreak
from pivotlaunch.core.models import TemplateRecord
from pivotlaunch.core.overlays import OverlayRegistry
from pivotlaunch.core.resolver import resolve
from pivotlaunch.core.sections import build_sections

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TemplateSection:
    """Blocks rendered for one template."""

    template_id: int
    blocks: tuple[DocumentBlock, ...]


def assemble_sections(
    templates: Iterable[TemplateRecord | Mapping[str, Any]],
    overlays: OverlayRegistry | Mapping[str, Any] | None = None,
) -> list[TemplateSection]:
    """Render each template independently, preserving input order."""
    sections = []
    for template in templates:
        view = resolve(template, overlays)
        blocks = tuple(build_sections(view))
        logger.debug(
            "template_assembled",
            template_id=view.template_id,
            blocks=len(blocks),
            has_overlay=view.overlay is not None,
        )
        sections.append(TemplateSection(template_id=view.template_id, blocks=blocks))
    return sections


def flatten(sections: Iterable[TemplateSection]) -> list[DocumentBlock]:
    """Join template sections with a page break between neighbours."""
    blocks: list[DocumentBlock] = []
    for i, section in enumerate(sections):
        if i > 0:
            blocks.append(PageBreak())
        blocks.extend(section.blocks)
    return blocks


def assemble(
    templates: Iterable[TemplateRecord | Mapping[str, Any]],
    overlays: OverlayRegistry | Mapping[str, Any] | None = None,
) -> list[DocumentBlock]:
    """Flattened block sequence for a whole export.

    n templates produce exactly n - 1 page breaks. No reordering and no
    deduplication across templates.
    """
    return flatten(assemble_sections(templates, overlays))
