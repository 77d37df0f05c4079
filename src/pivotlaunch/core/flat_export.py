"""Flat JSON and CSV dumps of template records.

These formats export the stored fields only; no overlay data and no
document structure.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Sequence

from pivotlaunch.core.models import TemplateRecord

JSON_CONTENT_TYPE = "application/json"
CSV_CONTENT_TYPE = "text/csv; charset=utf-8"

CSV_COLUMNS = (
    "id",
    "name",
    "description",
    "discipline",
    "category",
    "estimated_duration",
    "difficulty_level",
    "phases",
    "deliverables",
    "tools",
)

LIST_SEPARATOR = "; "


def serialize_json(templates: Sequence[TemplateRecord]) -> bytes:
    """Indented JSON array of template records, in input order."""
    data = [template.model_dump(mode="json") for template in templates]
    return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True).encode("utf-8")


def serialize_csv(templates: Sequence[TemplateRecord]) -> bytes:
    """One CSV row per template; list columns joined with "; "."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for t in templates:
        writer.writerow(
            [
                t.id,
                t.name,
                t.description,
                t.discipline,
                t.category,
                t.estimated_duration or "",
                t.difficulty_level or "",
                LIST_SEPARATOR.join(t.content.phases),
                LIST_SEPARATOR.join(t.content.deliverables),
                LIST_SEPARATOR.join(t.content.tools),
            ]
        )
    return buffer.getvalue().encode("utf-8")
