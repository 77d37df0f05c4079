"""Tests for template and export endpoints (F5)."""

import io
import json

import pytest
from docx import Document
from fastapi.testclient import TestClient

from pivotlaunch.core.blocks import SerializationError
from pivotlaunch.core.docx_writer import DOCX_CONTENT_TYPE
from pivotlaunch.core.overlays import builtin_registry
from pivotlaunch.db.templates_repository import InMemoryTemplateStore
from pivotlaunch.web.api import create_app
from pivotlaunch.web.routes.templates import get_overlay_registry, get_template_store


@pytest.fixture
def store():
    return InMemoryTemplateStore(
        [
            {
                "id": 1,
                "name": "Blockchain Applications",
                "discipline": "Blockchain",
                "template": {"phases": ["Research"], "tools": ["Solidity"]},
            },
            {"id": 2, "name": "Unknown Topic", "template": {"phases": ["CustomStage"]}},
        ]
    )


@pytest.fixture
def client(store):
    """Create test client with an in-memory store."""
    app = create_app()
    app.dependency_overrides[get_template_store] = lambda: store
    app.dependency_overrides[get_overlay_registry] = builtin_registry
    return TestClient(app)


class TestListTemplates:
    """Tests for GET /api/templates."""

    def test_list(self, client):
        data = client.get("/api/templates").json()
        assert data["count"] == 2
        assert [t["id"] for t in data["templates"]] == [1, 2]

    def test_overlay_flag(self, client):
        templates = client.get("/api/templates").json()["templates"]
        assert templates[0]["has_overlay"] is True
        assert templates[1]["has_overlay"] is False


class TestGetTemplate:
    """Tests for GET /api/templates/{id}."""

    def test_get(self, client):
        response = client.get("/api/templates/1")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Blockchain Applications"
        assert data["phases"] == ["Research"]

    def test_not_found(self, client):
        assert client.get("/api/templates/99").status_code == 404


class TestExportEndpoint:
    """Tests for POST /api/templates/export."""

    def test_docx_download(self, client):
        response = client.post("/api/templates/export", json={"templateIds": [2, 1], "format": "docx"})
        assert response.status_code == 200
        assert response.headers["content-type"] == DOCX_CONTENT_TYPE
        assert 'filename="PBL-Templates-Professional-Guide.docx"' in response.headers["content-disposition"]

        doc = Document(io.BytesIO(response.content))
        titles = [p.text for p in doc.paragraphs if p.style.name == "Title"]
        assert titles == ["Unknown Topic", "Blockchain Applications"]

    def test_snake_case_body(self, client):
        response = client.post("/api/templates/export", json={"template_ids": [1], "format": "json"})
        assert response.status_code == 200
        assert json.loads(response.content)[0]["id"] == 1

    def test_filename_override(self, client):
        response = client.post(
            "/api/templates/export",
            json={"templateIds": [1], "format": "csv", "filename": "mine.csv"},
        )
        assert 'filename="mine.csv"' in response.headers["content-disposition"]

    def test_unknown_id_404(self, client):
        response = client.post("/api/templates/export", json={"templateIds": [1, 99]})
        assert response.status_code == 404
        assert "99" in response.json()["detail"]

    def test_empty_ids_400(self, client):
        response = client.post("/api/templates/export", json={"templateIds": [], "format": "docx"})
        assert response.status_code == 400

    def test_bad_format_400(self, client):
        response = client.post("/api/templates/export", json={"templateIds": [1], "format": "pptx"})
        assert response.status_code == 400

    def test_render_failure_500(self, client, monkeypatch):
        from pivotlaunch.core import exporter

        def failing_render_body(blocks):
            raise SerializationError("boom")

        monkeypatch.setattr(exporter, "render_body", failing_render_body)
        response = client.post("/api/templates/export", json={"templateIds": [2], "format": "word-html"})
        assert response.status_code == 500
        assert response.json()["template_id"] == 2

    def test_non_ascii_filename(self, client):
        response = client.post(
            "/api/templates/export",
            json={"templateIds": [1], "format": "docx", "filename": "Guía.docx"},
        )
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="Guia.docx"' in disposition
        assert "filename*=UTF-8''Gu%C3%ADa.docx" in disposition

    def test_control_character_template_500(self, client):
        client.app.dependency_overrides[get_template_store] = lambda: InMemoryTemplateStore(
            [{"id": 1, "name": "Good"}, {"id": 2, "name": "Pasted", "description": "a\x0bb"}]
        )
        response = client.post("/api/templates/export", json={"templateIds": [1, 2], "format": "docx"})
        assert response.status_code == 500
        assert response.json()["template_id"] == 2
