"""Validated input models for template records and enhanced overlays.

Records come from the template store as loosely-typed JSON. They are parsed
once here so the section builders can rely on well-formed input:

- content lists (phases, deliverables, tools) are always lists of strings
- overlay phases are either fully typed or None

Both snake_case and the legacy camelCase keys are accepted.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

logger = structlog.get_logger(__name__)


def _normalize_str_list(value: Any, field_name: str) -> list[str]:
    """Coerce a loosely-typed list field into a list of strings.

    Missing or None becomes []. Any other non-list shape also becomes []
    and is reported as a data-quality warning. Non-string items are dropped.
    """
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        logger.warning(
            "template_content_malformed",
            field=field_name,
            got=type(value).__name__,
        )
        return []
    items = [item for item in value if isinstance(item, str)]
    if len(items) != len(value):
        logger.warning(
            "template_content_items_dropped",
            field=field_name,
            dropped=len(value) - len(items),
        )
    return items


# =============================================================================
# TEMPLATE RECORD
# =============================================================================


class TemplateContent(BaseModel):
    """Ordered content lists of a template."""

    model_config = ConfigDict(frozen=True)

    phases: list[str] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)

    @field_validator("phases", "deliverables", "tools", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any, info: ValidationInfo) -> list[str]:
        return _normalize_str_list(value, info.field_name)


class TemplateRecord(BaseModel):
    """A project template as stored in the template store."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    description: str = ""
    discipline: str = ""
    category: str = ""
    content: TemplateContent = Field(
        default_factory=TemplateContent,
        validation_alias=AliasChoices("content", "template"),
    )
    estimated_duration: str | None = Field(
        default=None,
        validation_alias=AliasChoices("estimated_duration", "estimatedDuration"),
    )
    difficulty_level: str | None = Field(
        default=None,
        validation_alias=AliasChoices("difficulty_level", "difficultyLevel"),
    )
    icon: str | None = None
    color: str | None = None
    is_active: bool = Field(
        default=True,
        validation_alias=AliasChoices("is_active", "isActive"),
    )

    @field_validator("description", "discipline", "category", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, Mapping) and not isinstance(value, TemplateContent):
            logger.warning("template_content_malformed", field="content", got=type(value).__name__)
            return {}
        return value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TemplateRecord:
        """Parse a raw store row or JSON object."""
        return cls.model_validate(dict(data))


# =============================================================================
# ENHANCED OVERLAY
# =============================================================================


class _OverlayModel(BaseModel):
    """Base for overlay models: immutable, camelCase or snake_case keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class AssessmentCriterion(_OverlayModel):
    criterion: str
    description: str = ""
    exemplar: str = ""
    low_performance: str = ""
    high_performance: str = ""


class PivotPhase(_OverlayModel):
    """Core knowledge anchoring data."""

    learning_objectives: list[str] = Field(default_factory=list)
    core_concept_definition: str = ""
    constraints_and_boundaries: str = ""
    minimal_working_example: str = ""
    common_misconceptions: list[str] = Field(default_factory=list)
    cognitive_load_considerations: str = ""
    assessment_criteria: list[AssessmentCriterion] = Field(default_factory=list)


class NearTransfer(_OverlayModel):
    title: str
    description: str = ""
    scaffolding: list[str] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list)
    time_estimate: str = ""


class ModerateTransfer(_OverlayModel):
    title: str
    description: str = ""
    challenge_level: str = ""
    deliverables: list[str] = Field(default_factory=list)
    time_estimate: str = ""


class FarTransfer(_OverlayModel):
    title: str
    description: str = ""
    novel_context: str = ""
    deliverables: list[str] = Field(default_factory=list)
    time_estimate: str = ""


class TransferActivities(_OverlayModel):
    near_transfer: NearTransfer
    moderate_transfer: ModerateTransfer
    far_transfer: FarTransfer


class FinalProjectRequirements(_OverlayModel):
    description: str = ""
    constraints: list[str] = Field(default_factory=list)
    evaluation_criteria: list[str] = Field(default_factory=list)
    presentation_format: str = ""


class LaunchPhase(_OverlayModel):
    """Application development data (near/moderate/far transfer)."""

    transfer_activities: TransferActivities
    final_project_requirements: FinalProjectRequirements | None = None


class EnhancedOverlay(_OverlayModel):
    """Optional enrichment matched to a template record."""

    pivot_phase: PivotPhase | None = None
    launch_phase: LaunchPhase | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EnhancedOverlay:
        """Parse an overlay from a JSON/YAML object."""
        return cls.model_validate(dict(data))
