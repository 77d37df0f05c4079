"""Repository functions for the project_templates table.

Rows are returned as validated TemplateRecord objects. A malformed
template JSON column is normalized to empty content, never raised.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Sequence

import structlog

from pivotlaunch.core.models import TemplateRecord
from pivotlaunch.db.database import get_db

logger = structlog.get_logger(__name__)


def insert_template(data: dict[str, Any]) -> int:
    """Insert a template record.

    Args:
        data: Template fields. "template" (or "content") holds the
            phases/deliverables/tools bag. "id" is used when given.

    Returns:
        The new template id
    """
    content = data.get("template", data.get("content")) or {}
    with get_db() as conn:
        cursor = conn.execute(
            """
            INSERT INTO project_templates (
                id, name, description, discipline, category, template,
                icon, color, estimated_duration, difficulty_level, is_active
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                data.get("id"),
                data["name"],
                data.get("description") or "",
                data.get("discipline") or "",
                data.get("category") or "",
                json.dumps(content),
                data.get("icon"),
                data.get("color"),
                data.get("estimated_duration", data.get("estimatedDuration")),
                data.get("difficulty_level", data.get("difficultyLevel", "intermediate")),
                1 if data.get("is_active", data.get("isActive", True)) else 0,
            ),
        )
        template_id = cursor.lastrowid

    logger.debug("templates.inserted", template_id=template_id, name=data["name"])
    return template_id


def insert_templates(items: Iterable[dict[str, Any]]) -> list[int]:
    return [insert_template(item) for item in items]


def get_template_by_id(template_id: int) -> TemplateRecord | None:
    """Get template by ID.

    Returns:
        TemplateRecord if found, None otherwise
    """
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM project_templates WHERE id = ?", (template_id,)
        ).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def get_templates_by_ids(template_ids: Sequence[int]) -> list[TemplateRecord]:
    """Get templates in the order of the requested ids.

    Unknown ids are skipped; callers compare lengths to detect them.
    Repeated ids yield repeated records.
    """
    if not template_ids:
        return []

    unique_ids = list(dict.fromkeys(template_ids))
    placeholders = ", ".join("?" for _ in unique_ids)
    with get_db() as conn:
        rows = conn.execute(
            f"SELECT * FROM project_templates WHERE id IN ({placeholders})",
            unique_ids,
        ).fetchall()

    by_id = {row["id"]: _row_to_record(row) for row in rows}
    return [by_id[tid] for tid in template_ids if tid in by_id]


def get_all_templates(active_only: bool = True) -> list[TemplateRecord]:
    """Get all templates ordered by id."""
    query = "SELECT * FROM project_templates"
    if active_only:
        query += " WHERE is_active = 1"
    query += " ORDER BY id"

    with get_db() as conn:
        rows = conn.execute(query).fetchall()

    return [_row_to_record(row) for row in rows]


def delete_template(template_id: int) -> bool:
    """Delete template by ID.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute(
            "DELETE FROM project_templates WHERE id = ?", (template_id,)
        )

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("templates.deleted", template_id=template_id)

    return deleted


def _row_to_record(row) -> TemplateRecord:
    """Convert database row to TemplateRecord."""
    try:
        content = json.loads(row["template"]) if row["template"] else {}
    except json.JSONDecodeError:
        logger.warning("template_json_invalid", template_id=row["id"])
        content = {}

    return TemplateRecord.from_mapping(
        {
            "id": row["id"],
            "name": row["name"],
            "description": row["description"],
            "discipline": row["discipline"],
            "category": row["category"],
            "template": content,
            "icon": row["icon"],
            "color": row["color"],
            "estimated_duration": row["estimated_duration"],
            "difficulty_level": row["difficulty_level"],
            "is_active": bool(row["is_active"]),
        }
    )


class SqliteTemplateStore:
    """Template store backed by the project_templates table."""

    def get_templates_by_ids(self, template_ids: Sequence[int]) -> list[TemplateRecord]:
        return get_templates_by_ids(template_ids)

    def list_templates(self) -> list[TemplateRecord]:
        return get_all_templates()


class InMemoryTemplateStore:
    """Template store over a fixed list of records."""

    def __init__(self, records: Iterable[TemplateRecord | dict[str, Any]]):
        self._records: dict[int, TemplateRecord] = {}
        for record in records:
            if not isinstance(record, TemplateRecord):
                record = TemplateRecord.from_mapping(record)
            self._records[record.id] = record

    def get_templates_by_ids(self, template_ids: Sequence[int]) -> list[TemplateRecord]:
        return [self._records[tid] for tid in template_ids if tid in self._records]

    def list_templates(self) -> list[TemplateRecord]:
        return [self._records[tid] for tid in sorted(self._records)]
