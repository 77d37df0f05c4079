"""Template data resolver.

Merges a template record with its (optional) enhanced overlay into a
ResolvedTemplateView, the single input of every section builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from pivotlaunch.core import fallbacks
from pivotlaunch.core.models import (
    EnhancedOverlay,
    LaunchPhase,
    PivotPhase,
    TemplateRecord,
)
from pivotlaunch.core.overlays import OverlayRegistry


@dataclass(frozen=True)
class ResolvedTemplateView:
    """Merged, read-only view of one template for rendering."""

    record: TemplateRecord
    overlay: EnhancedOverlay | None
    phases: tuple[str, ...]
    deliverables: tuple[str, ...]
    tools: tuple[str, ...]
    phase_activities: Callable[[str], str] = field(default=fallbacks.phase_activities)
    phase_duration: Callable[[str], str] = field(default=fallbacks.phase_duration)
    tool_description: Callable[[str], str] = field(default=fallbacks.tool_description)

    @property
    def template_id(self) -> int:
        return self.record.id

    @property
    def pivot(self) -> PivotPhase | None:
        return self.overlay.pivot_phase if self.overlay else None

    @property
    def launch(self) -> LaunchPhase | None:
        return self.overlay.launch_phase if self.overlay else None


def resolve(
    record: TemplateRecord | Mapping[str, Any],
    overlays: OverlayRegistry | Mapping[str, Any] | None = None,
) -> ResolvedTemplateView:
    """Resolve a template record against the overlay table.

    A missing overlay is an expected outcome: the view simply carries
    overlay=None. Inputs are never mutated.

    Args:
        record: TemplateRecord, or a raw mapping parsed as one
        overlays: OverlayRegistry, or a display-name keyed mapping

    Returns:
        A new ResolvedTemplateView
    """
    if not isinstance(record, TemplateRecord):
        record = TemplateRecord.from_mapping(record)

    if overlays is None:
        registry = OverlayRegistry()
    elif isinstance(overlays, OverlayRegistry):
        registry = overlays
    else:
        registry = OverlayRegistry.from_name_map(overlays)

    content = record.content
    return ResolvedTemplateView(
        record=record,
        overlay=registry.lookup(record),
        phases=tuple(content.phases),
        deliverables=tuple(content.deliverables),
        tools=tuple(content.tools),
    )
