"""Tests for template record and overlay models (F1)."""

import pytest
from pydantic import ValidationError

from pivotlaunch.core.models import EnhancedOverlay, TemplateContent, TemplateRecord


class TestTemplateRecordParsing:
    """Tests for TemplateRecord.from_mapping()."""

    def test_legacy_template_key(self):
        """Content may be stored under "template"."""
        record = TemplateRecord.from_mapping(
            {
                "id": 1,
                "name": "Data Science",
                "template": {"phases": ["Exploration"], "tools": ["Python"]},
            }
        )
        assert record.content.phases == ["Exploration"]
        assert record.content.tools == ["Python"]
        assert record.content.deliverables == []

    def test_content_key(self):
        record = TemplateRecord.from_mapping(
            {"id": 2, "name": "X", "content": {"deliverables": ["Report"]}}
        )
        assert record.content.deliverables == ["Report"]

    def test_camel_case_fields(self):
        """Legacy camelCase keys are accepted."""
        record = TemplateRecord.from_mapping(
            {
                "id": 3,
                "name": "X",
                "estimatedDuration": "8-12 weeks",
                "difficultyLevel": "advanced",
                "isActive": False,
            }
        )
        assert record.estimated_duration == "8-12 weeks"
        assert record.difficulty_level == "advanced"
        assert record.is_active is False

    def test_missing_optional_fields(self):
        """Only id and name are required."""
        record = TemplateRecord.from_mapping({"id": 4, "name": "Minimal"})
        assert record.description == ""
        assert record.estimated_duration is None
        assert record.content == TemplateContent()

    def test_null_text_fields(self):
        """Explicit nulls in text fields read as empty strings."""
        record = TemplateRecord.from_mapping(
            {"id": 7, "name": "X", "description": None, "discipline": None, "category": None}
        )
        assert record.description == ""
        assert record.discipline == ""
        assert record.category == ""

    def test_missing_name_rejected(self):
        with pytest.raises(ValidationError):
            TemplateRecord.from_mapping({"id": 5})

    def test_record_is_frozen(self):
        record = TemplateRecord.from_mapping({"id": 6, "name": "X"})
        with pytest.raises(ValidationError):
            record.name = "Y"


class TestContentNormalization:
    """Malformed content lists normalize to empty, never raise."""

    def test_none_content(self):
        record = TemplateRecord.from_mapping({"id": 1, "name": "X", "template": None})
        assert record.content.phases == []

    def test_non_mapping_content(self):
        record = TemplateRecord.from_mapping({"id": 1, "name": "X", "template": "garbage"})
        assert record.content == TemplateContent()

    def test_non_list_phases(self):
        """A string where a list is expected becomes []."""
        record = TemplateRecord.from_mapping(
            {"id": 1, "name": "X", "template": {"phases": "Research", "tools": {"a": 1}}}
        )
        assert record.content.phases == []
        assert record.content.tools == []

    def test_null_list(self):
        record = TemplateRecord.from_mapping(
            {"id": 1, "name": "X", "template": {"deliverables": None}}
        )
        assert record.content.deliverables == []

    def test_non_string_items_dropped(self):
        """Non-string items are dropped, order of the rest kept."""
        record = TemplateRecord.from_mapping(
            {"id": 1, "name": "X", "template": {"phases": ["Research", 7, None, "Design"]}}
        )
        assert record.content.phases == ["Research", "Design"]


class TestEnhancedOverlay:
    """Tests for EnhancedOverlay parsing."""

    def test_camel_case_pivot(self):
        overlay = EnhancedOverlay.from_mapping(
            {
                "pivotPhase": {
                    "learningObjectives": ["A", "B"],
                    "commonMisconceptions": ["M"],
                    "assessmentCriteria": [
                        {"criterion": "C", "lowPerformance": "low", "highPerformance": "high"}
                    ],
                }
            }
        )
        assert overlay.pivot_phase.learning_objectives == ["A", "B"]
        assert overlay.pivot_phase.assessment_criteria[0].low_performance == "low"
        assert overlay.launch_phase is None

    def test_snake_case_pivot(self):
        overlay = EnhancedOverlay.from_mapping(
            {"pivot_phase": {"core_concept_definition": "Definition"}}
        )
        assert overlay.pivot_phase.core_concept_definition == "Definition"

    def test_empty_overlay(self):
        """Both phases are independently optional."""
        overlay = EnhancedOverlay.from_mapping({})
        assert overlay.pivot_phase is None
        assert overlay.launch_phase is None

    def test_launch_requires_all_transfer_levels(self):
        with pytest.raises(ValidationError):
            EnhancedOverlay.from_mapping(
                {"launchPhase": {"transferActivities": {"nearTransfer": {"title": "Near"}}}}
            )
