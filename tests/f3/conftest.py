"""Shared fixtures for serializer tests (F3)."""

import pytest

from pivotlaunch.core.assembler import assemble
from pivotlaunch.core.models import TemplateRecord
from pivotlaunch.core.overlays import builtin_registry


@pytest.fixture
def records():
    return [
        TemplateRecord.from_mapping(
            {
                "id": 1,
                "name": "Blockchain Applications",
                "description": "Smart contract development",
                "discipline": "Blockchain",
                "category": "Development",
                "template": {
                    "phases": ["Research", "Development"],
                    "deliverables": ["Smart contract code", "Documentation"],
                    "tools": ["Solidity", "Remix"],
                },
                "estimatedDuration": "8-12 weeks",
            }
        ),
        TemplateRecord.from_mapping(
            {"id": 2, "name": "Unknown Topic", "template": {"phases": ["CustomStage"]}}
        ),
    ]


@pytest.fixture
def blocks(records):
    return assemble(records, builtin_registry())
