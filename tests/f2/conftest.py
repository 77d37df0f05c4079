"""Shared fixtures for rendering tests (F2)."""

import pytest

from pivotlaunch.core.overlays import builtin_registry


@pytest.fixture
def registry():
    return builtin_registry()


@pytest.fixture
def blockchain_record():
    """Scenario A input."""
    return {
        "id": 1,
        "name": "Blockchain Applications",
        "description": "Smart contract development with real-world use cases",
        "discipline": "Blockchain",
        "category": "Development",
        "template": {
            "phases": ["Research", "Development"],
            "tools": ["Solidity"],
            "deliverables": ["Smart contract code"],
        },
        "estimatedDuration": "8-12 weeks",
        "difficultyLevel": "intermediate",
    }


@pytest.fixture
def unknown_record():
    """Scenario B input."""
    return {"id": 2, "name": "Unknown Topic", "template": {"phases": ["CustomStage"]}}

