"""Section builders for the instructor guide.

One builder per document region. Each maps a ResolvedTemplateView to an
ordered list of blocks and emits nothing when its input is absent. Builders
are pure: calling one twice on the same view yields equal output.

Document grammar (see SECTION_BUILDERS):
- Overview (always present)
- Pivot Phase (overlay pivot data)
- Launch Phase (overlay launch data)
- Project Implementation Phases (template phases)
- Assessment Framework (overlay assessment criteria)
- Instructor Resources (static)
- Student Templates and Materials (static)
- Appendices (template tools and deliverables)
"""

from __future__ import annotations

from typing import Callable

from pivotlaunch.core.blocks import (
    COLOR_LAUNCH,
    COLOR_PIVOT,
    COLOR_SUBTITLE,
    COLOR_TITLE,
    COLOR_WARNING,
    INDENT_PT,
    Align,
    DocumentBlock,
    Heading,
    Paragraph,
    Table,
    TextRun,
    bullet,
    cell,
    heading,
    key_value,
    paragraph,
    text_paragraph,
)
from pivotlaunch.core.fallbacks import phase_deliverables
from pivotlaunch.core.resolver import ResolvedTemplateView

SectionBuilder = Callable[[ResolvedTemplateView], list[DocumentBlock]]

SUBTITLE = "Pivot-and-Launch Project-Based Learning Guide"
DEFAULT_DURATION = "Not specified"
DEFAULT_DIFFICULTY = "Intermediate"
INSTRUCTOR_TIP_LABEL = "[INSTRUCTOR TIP] "

ASSESSMENT_HEADER = ("Criterion", "Description", "Low Performance", "High Performance")
ASSESSMENT_WIDTHS = (20, 30, 25, 25)

FACILITATION_TIPS = (
    "Start each session with a brief review of core concepts from the pivot phase",
    "Use think-pair-share activities to encourage peer learning and reduce cognitive load",
    "Provide regular checkpoints to assess understanding before moving to next transfer level",
    "Encourage reflection journals to help students connect concepts across contexts",
)

PROJECT_PLAN_PROMPTS = (
    ("Problem Statement", "What specific problem are you solving?"),
    ("Core Concepts Applied", "Which pivot concepts will you use?"),
    ("Success Criteria", "How will you know if your solution works?"),
    ("Timeline and Milestones", "When will you complete each phase?"),
    ("Resources Needed", "What tools, data, or support do you need?"),
)


def _section_heading(text: str, color: str = COLOR_TITLE) -> Heading:
    return heading(1, text, color=color, size=14)


def _subheading(text: str) -> Heading:
    return heading(2, text, size=12, underline=True)


# =============================================================================
# BUILDERS
# =============================================================================


def build_overview(view: ResolvedTemplateView) -> list[DocumentBlock]:
    """Title, subtitle and the template's key facts. Never empty."""
    record = view.record
    return [
        heading(0, record.name, color=COLOR_TITLE, size=16, align=Align.CENTER),
        paragraph(TextRun(SUBTITLE, color=COLOR_SUBTITLE, size=11), align=Align.CENTER),
        _section_heading("Template Overview"),
        key_value("Discipline", record.discipline),
        key_value("Category", record.category),
        key_value("Duration", record.estimated_duration or DEFAULT_DURATION),
        key_value("Difficulty Level", record.difficulty_level or DEFAULT_DIFFICULTY),
        key_value("Description", record.description),
    ]


def build_pivot_phase(view: ResolvedTemplateView) -> list[DocumentBlock]:
    pivot = view.pivot
    if pivot is None:
        return []

    blocks: list[DocumentBlock] = [
        _section_heading("PIVOT PHASE: Core Knowledge Anchoring", color=COLOR_PIVOT),
        _subheading("Learning Objectives"),
    ]
    blocks.extend(bullet(objective) for objective in pivot.learning_objectives)
    blocks += [
        _subheading("Core Concept Definition"),
        text_paragraph(pivot.core_concept_definition),
        _subheading("Constraints and Boundaries"),
        text_paragraph(pivot.constraints_and_boundaries),
        _subheading("Minimal Working Example"),
        paragraph(TextRun(pivot.minimal_working_example, italic=True)),
        _subheading("Common Student Misconceptions"),
    ]
    blocks.extend(bullet(m, color=COLOR_WARNING) for m in pivot.common_misconceptions)
    blocks += [
        _subheading("Cognitive Load Management"),
        paragraph(
            TextRun(INSTRUCTOR_TIP_LABEL, bold=True, color=COLOR_LAUNCH),
            TextRun(pivot.cognitive_load_considerations),
        ),
    ]
    return blocks


def build_launch_phase(view: ResolvedTemplateView) -> list[DocumentBlock]:
    launch = view.launch
    if launch is None:
        return []

    activities = launch.transfer_activities
    blocks: list[DocumentBlock] = [
        _section_heading("LAUNCH PHASE: Application Development", color=COLOR_LAUNCH),
        _subheading("Progressive Transfer Activities"),
    ]
    for label, activity in (
        ("Near Transfer", activities.near_transfer),
        ("Moderate Transfer", activities.moderate_transfer),
        ("Far Transfer", activities.far_transfer),
    ):
        blocks.append(
            paragraph(
                TextRun(f"{label}: ", bold=True, color=COLOR_LAUNCH),
                TextRun(activity.title),
            )
        )
        blocks.append(text_paragraph(activity.description, indent=INDENT_PT))

    requirements = launch.final_project_requirements
    if requirements is not None:
        blocks.append(_subheading("Final Project Requirements"))
        blocks.append(text_paragraph(requirements.description))
        if requirements.constraints:
            blocks.append(paragraph(TextRun("Constraints:", bold=True)))
            blocks.extend(bullet(c) for c in requirements.constraints)
        if requirements.evaluation_criteria:
            blocks.append(paragraph(TextRun("Evaluation Criteria:", bold=True)))
            blocks.extend(bullet(c) for c in requirements.evaluation_criteria)
        if requirements.presentation_format:
            blocks.append(key_value("Presentation Format", requirements.presentation_format))
    return blocks


def build_phases(view: ResolvedTemplateView) -> list[DocumentBlock]:
    """One block group per listed phase, in order, never skipping one."""
    deliverables = phase_deliverables(view.deliverables)
    blocks: list[DocumentBlock] = [_section_heading("Project Implementation Phases")]
    for index, phase in enumerate(view.phases):
        blocks += [
            heading(3, f"Phase {index + 1}: {phase}", size=11),
            key_value("Key Activities", view.phase_activities(phase), indent=INDENT_PT),
            key_value("Deliverables", deliverables, indent=INDENT_PT),
            key_value("Estimated Duration", view.phase_duration(phase), indent=INDENT_PT),
        ]
    return blocks


def build_assessment(view: ResolvedTemplateView) -> list[DocumentBlock]:
    """Rubric table with one row per assessment criterion."""
    pivot = view.pivot
    if pivot is None or not pivot.assessment_criteria:
        return []

    rows = [tuple(cell(title, bold=True) for title in ASSESSMENT_HEADER)]
    for criterion in pivot.assessment_criteria:
        rows.append(
            (
                cell(criterion.criterion),
                cell(criterion.description),
                cell(criterion.low_performance),
                cell(criterion.high_performance),
            )
        )
    return [
        _section_heading("Assessment Framework"),
        Table(rows=tuple(rows), column_widths=ASSESSMENT_WIDTHS),
    ]


def build_instructor_resources(view: ResolvedTemplateView) -> list[DocumentBlock]:
    """Static facilitation tips, identical for every template."""
    blocks: list[DocumentBlock] = [
        _section_heading("Instructor Resources"),
        _subheading("Facilitation Tips"),
    ]
    blocks.extend(bullet(tip) for tip in FACILITATION_TIPS)
    return blocks


def build_student_materials(view: ResolvedTemplateView) -> list[DocumentBlock]:
    """Static project planning skeleton, identical for every template."""
    blocks: list[DocumentBlock] = [
        _section_heading("Student Templates and Materials"),
        _subheading("Project Planning Template"),
    ]
    for number, (label, prompt) in enumerate(PROJECT_PLAN_PROMPTS, 1):
        blocks.append(text_paragraph(f"{number}. {label}: [{prompt}]", indent=INDENT_PT))
    return blocks


def build_appendices(view: ResolvedTemplateView) -> list[DocumentBlock]:
    """Tools and deliverables. Sub-headings render even for empty lists."""
    blocks: list[DocumentBlock] = [
        _section_heading("Appendices"),
        _subheading("Required Tools and Technologies"),
    ]
    for tool in view.tools:
        blocks.append(
            Paragraph(
                runs=(
                    TextRun(f"• {tool}", bold=True),
                    TextRun(f" — {view.tool_description(tool)}"),
                ),
                indent=INDENT_PT,
            )
        )
    blocks.append(_subheading("Expected Deliverables"))
    blocks.extend(bullet(d, bold=True) for d in view.deliverables)
    return blocks


# Grammar order
SECTION_BUILDERS: tuple[tuple[str, SectionBuilder], ...] = (
    ("overview", build_overview),
    ("pivot_phase", build_pivot_phase),
    ("launch_phase", build_launch_phase),
    ("phases", build_phases),
    ("assessment", build_assessment),
    ("instructor_resources", build_instructor_resources),
    ("student_materials", build_student_materials),
    ("appendices", build_appendices),
)


def build_sections(view: ResolvedTemplateView) -> list[DocumentBlock]:
    """Run all builders in grammar order and concatenate their output."""
    blocks: list[DocumentBlock] = []
    for _, builder in SECTION_BUILDERS:
        blocks.extend(builder(view))
    return blocks
