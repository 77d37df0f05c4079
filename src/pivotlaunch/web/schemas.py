"""Pydantic schemas for the Web API.

Request and response models for templates and exports.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from pivotlaunch.core.models import TemplateRecord


# =============================================================================
# TEMPLATE SCHEMAS
# =============================================================================


class TemplateSummary(BaseModel):
    """Template list entry."""

    id: int
    name: str
    description: str
    discipline: str
    category: str
    estimated_duration: str | None = None
    difficulty_level: str | None = None
    phase_count: int = 0
    has_overlay: bool = False

    @classmethod
    def from_record(cls, record: TemplateRecord, has_overlay: bool = False) -> TemplateSummary:
        return cls(
            id=record.id,
            name=record.name,
            description=record.description,
            discipline=record.discipline,
            category=record.category,
            estimated_duration=record.estimated_duration,
            difficulty_level=record.difficulty_level,
            phase_count=len(record.content.phases),
            has_overlay=has_overlay,
        )


class TemplateDetail(TemplateSummary):
    """Full template with content lists."""

    phases: list[str] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: TemplateRecord, has_overlay: bool = False) -> TemplateDetail:
        summary = TemplateSummary.from_record(record, has_overlay)
        return cls(
            **summary.model_dump(),
            phases=list(record.content.phases),
            deliverables=list(record.content.deliverables),
            tools=list(record.content.tools),
        )


class TemplateListResponse(BaseModel):
    """Response for list of templates."""

    templates: list[TemplateSummary]
    count: int


# =============================================================================
# EXPORT SCHEMAS
# =============================================================================


class ExportRequest(BaseModel):
    """Request body for an export.

    Accepts the web client's camelCase `templateIds` as well as
    `template_ids`.
    """

    model_config = ConfigDict(populate_by_name=True)

    template_ids: list[int] = Field(
        ...,
        validation_alias=AliasChoices("templateIds", "template_ids"),
    )
    format: str | None = None
    filename: str | None = None


class ExportErrorResponse(BaseModel):
    """Error body for a failed render."""

    detail: str
    template_id: int | None = None


# =============================================================================
# HEALTH
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    formats: list[str] = Field(default_factory=list)
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
