"""Fallback tables for phase and tool descriptions.

Each table is a total function over a closed enum. Raw strings from the
template store are classified with ``parse()``; anything outside the known
set maps to the explicit ``OTHER`` member, which carries the generic text.

Usage:
    from pivotlaunch.core.fallbacks import phase_activities, tool_description

    phase_activities("Testing")
    tool_description("Solidity")
"""

from __future__ import annotations

from enum import Enum


class PhaseName(str, Enum):
    """Recognized project phase names."""

    RESEARCH = "Research"
    DESIGN = "Design"
    DEVELOPMENT = "Development"
    TESTING = "Testing"
    DEPLOYMENT = "Deployment"
    DATA_COLLECTION = "Data Collection"
    EXPLORATION = "Exploration"
    MODELING = "Modeling"
    VALIDATION = "Validation"
    PRESENTATION = "Presentation"
    OTHER = "__other__"

    @classmethod
    def parse(cls, name: str) -> PhaseName:
        """Classify a raw phase name (exact match, else OTHER)."""
        try:
            member = cls(name)
        except ValueError:
            return cls.OTHER
        return member


class ToolName(str, Enum):
    """Recognized tool names."""

    SOLIDITY = "Solidity"
    REMIX = "Remix"
    WEB3 = "Web3"
    PYTHON = "Python"
    JUPYTER = "Jupyter"
    PANDAS = "Pandas"
    SCIKIT_LEARN = "Scikit-learn"
    OTHER = "__other__"

    @classmethod
    def parse(cls, name: str) -> ToolName:
        """Classify a raw tool name (exact match, else OTHER)."""
        try:
            member = cls(name)
        except ValueError:
            return cls.OTHER
        return member


# =============================================================================
# TABLES
# =============================================================================

GENERIC_PHASE_ACTIVITIES = "Phase-specific activities and learning tasks"
GENERIC_PHASE_DURATION = "1-2 weeks"
GENERIC_PHASE_DELIVERABLES = "Phase-specific deliverables and documentation"
GENERIC_TOOL_DESCRIPTION = "Professional development tool"

PHASE_ACTIVITIES: dict[PhaseName, str] = {
    PhaseName.RESEARCH: "Literature review, problem identification, background analysis",
    PhaseName.DESIGN: "Solution architecture, wireframes, technical specifications",
    PhaseName.DEVELOPMENT: "Implementation, coding, prototyping, iterative building",
    PhaseName.TESTING: "Unit testing, integration testing, user acceptance testing",
    PhaseName.DEPLOYMENT: "Production setup, documentation, final presentation",
    PhaseName.DATA_COLLECTION: "Gathering datasets, defining data requirements, data quality assessment",
    PhaseName.EXPLORATION: "Exploratory data analysis, visualization, pattern identification",
    PhaseName.MODELING: "Algorithm selection, model training, parameter tuning",
    PhaseName.VALIDATION: "Model evaluation, cross-validation, performance metrics",
    PhaseName.PRESENTATION: "Results communication, visualization, stakeholder reporting",
    PhaseName.OTHER: GENERIC_PHASE_ACTIVITIES,
}

PHASE_DURATIONS: dict[PhaseName, str] = {
    PhaseName.RESEARCH: "1-2 weeks",
    PhaseName.DESIGN: "1-2 weeks",
    PhaseName.DEVELOPMENT: "3-4 weeks",
    PhaseName.TESTING: "1-2 weeks",
    PhaseName.DEPLOYMENT: "1 week",
    PhaseName.DATA_COLLECTION: "1-2 weeks",
    PhaseName.EXPLORATION: "2-3 weeks",
    PhaseName.MODELING: "2-3 weeks",
    PhaseName.VALIDATION: "1-2 weeks",
    PhaseName.PRESENTATION: "1 week",
    PhaseName.OTHER: GENERIC_PHASE_DURATION,
}

TOOL_DESCRIPTIONS: dict[ToolName, str] = {
    ToolName.SOLIDITY: "Smart contract programming language for Ethereum blockchain",
    ToolName.REMIX: "Web-based IDE for smart contract development and testing",
    ToolName.WEB3: "JavaScript library for interacting with blockchain networks",
    ToolName.PYTHON: "Programming language for data analysis and machine learning",
    ToolName.JUPYTER: "Interactive notebook environment for data science",
    ToolName.PANDAS: "Data manipulation and analysis library for Python",
    ToolName.SCIKIT_LEARN: "Machine learning library for Python",
    ToolName.OTHER: GENERIC_TOOL_DESCRIPTION,
}


# =============================================================================
# LOOKUPS
# =============================================================================


def phase_activities(name: str) -> str:
    """Key activities for a phase name."""
    return PHASE_ACTIVITIES[PhaseName.parse(name)]


def phase_duration(name: str) -> str:
    """Estimated duration for a phase name."""
    return PHASE_DURATIONS[PhaseName.parse(name)]


def phase_deliverables(deliverables: tuple[str, ...] | list[str]) -> str:
    """Deliverables line for a phase.

    All phases of a template share the same deliverables list.
    """
    if deliverables:
        return ", ".join(deliverables)
    return GENERIC_PHASE_DELIVERABLES


def tool_description(name: str) -> str:
    """Description for a tool name."""
    return TOOL_DESCRIPTIONS[ToolName.parse(name)]
