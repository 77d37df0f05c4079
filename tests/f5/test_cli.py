"""Tests for the pnl CLI (F5)."""

import io
import json
import tempfile
from pathlib import Path

import pytest
from docx import Document
from typer.testing import CliRunner

from pivotlaunch.cli.commands import app
from pivotlaunch.config import app_config
from pivotlaunch.config.app_config import clear_config_cache
from pivotlaunch.core.overlays import clear_overlay_cache

runner = CliRunner()


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def cli_env(temp_dir, monkeypatch):
    """Isolated data dir, database and config."""
    data_dir = temp_dir / "data"
    (data_dir / "templates").mkdir(parents=True)
    monkeypatch.setenv("PNL_DATA_DIR", str(data_dir))
    monkeypatch.setenv("PNL_DB_PATH", str(temp_dir / "db" / "test.db"))
    monkeypatch.setattr(app_config, "CONFIG_FILE", temp_dir / "missing.yaml")
    clear_config_cache()
    clear_overlay_cache()
    yield data_dir
    clear_config_cache()
    clear_overlay_cache()


@pytest.fixture
def templates_file(cli_env):
    path = cli_env / "templates" / "sample.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": 1,
                    "name": "Blockchain Applications",
                    "discipline": "Blockchain",
                    "template": {"phases": ["Research", "Testing"], "tools": ["Solidity"]},
                },
                {"id": 2, "name": "Unknown Topic", "template": {"phases": ["CustomStage"]}},
            ]
        ),
        encoding="utf-8",
    )
    return path


class TestInitDb:
    def test_creates_database(self, cli_env, temp_dir):
        result = runner.invoke(app, ["init-db"])
        assert result.exit_code == 0
        assert (temp_dir / "db" / "test.db").exists()


class TestImportTemplates:
    """Tests for pnl import-templates."""

    def test_import_by_name_under_data_dir(self, templates_file):
        result = runner.invoke(app, ["import-templates", "sample.json"])
        assert result.exit_code == 0
        assert "2 template(s) imported" in result.stdout

    def test_import_missing_file(self, cli_env):
        result = runner.invoke(app, ["import-templates", "nope.json"])
        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_import_invalid_json(self, cli_env):
        (cli_env / "templates" / "bad.json").write_text("{", encoding="utf-8")
        result = runner.invoke(app, ["import-templates", "bad.json"])
        assert result.exit_code == 1

    def test_import_wrong_shape(self, cli_env):
        (cli_env / "templates" / "shape.json").write_text('[{"id": 1}]', encoding="utf-8")
        result = runner.invoke(app, ["import-templates", "shape.json"])
        assert result.exit_code == 1


class TestListing:
    def test_templates_empty(self, cli_env):
        result = runner.invoke(app, ["templates"])
        assert result.exit_code == 0
        assert "No templates yet" in result.stdout

    def test_templates_listed(self, templates_file):
        runner.invoke(app, ["import-templates", str(templates_file)])
        result = runner.invoke(app, ["templates"])
        assert result.exit_code == 0
        assert "Unknown Topic" in result.stdout

    def test_overlays_listed(self, cli_env):
        result = runner.invoke(app, ["overlays"])
        assert result.exit_code == 0
        assert "Blockchain Applications" in result.stdout
        assert "Data Science" in result.stdout


class TestExport:
    """Tests for pnl export."""

    def test_export_docx(self, templates_file, temp_dir):
        runner.invoke(app, ["import-templates", str(templates_file)])
        out = temp_dir / "out" / "guide.docx"
        result = runner.invoke(app, ["export", "2", "1", "--format", "docx", "--out", str(out)])

        assert result.exit_code == 0, result.stdout
        doc = Document(io.BytesIO(out.read_bytes()))
        titles = [p.text for p in doc.paragraphs if p.style.name == "Title"]
        assert titles == ["Unknown Topic", "Blockchain Applications"]

    def test_export_csv(self, templates_file, temp_dir):
        runner.invoke(app, ["import-templates", str(templates_file)])
        out = temp_dir / "data.csv"
        result = runner.invoke(app, ["export", "1", "-f", "csv", "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8").startswith("id,name,")

    def test_export_unknown_id(self, templates_file):
        runner.invoke(app, ["import-templates", str(templates_file)])
        result = runner.invoke(app, ["export", "1", "77"])
        assert result.exit_code == 1
        assert "77" in result.stdout

    def test_export_bad_format(self, templates_file):
        runner.invoke(app, ["import-templates", str(templates_file)])
        result = runner.invoke(app, ["export", "1", "--format", "pptx"])
        assert result.exit_code == 1
        assert "Unsupported export format" in result.stdout

    def test_export_control_character_reported(self, cli_env):
        path = cli_env / "templates" / "pasted.json"
        path.write_text(
            json.dumps([{"id": 3, "name": "Pasted", "description": "line one\x0bline two"}]),
            encoding="utf-8",
        )
        runner.invoke(app, ["import-templates", str(path)])
        result = runner.invoke(app, ["export", "3", "--format", "docx"])
        assert result.exit_code == 1
        assert "Failed to render template 3" in result.stdout

    def test_import_null_description(self, cli_env):
        path = cli_env / "templates" / "nulls.json"
        path.write_text(
            json.dumps([{"id": 4, "name": "Sparse", "description": None, "category": None}]),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["import-templates", str(path)])
        assert result.exit_code == 0, result.stdout
        assert "1 template(s) imported" in result.stdout
