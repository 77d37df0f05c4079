"""CLI commands for the Pivot-and-Launch guide exporter.

Commands:
- init-db: Create the local template store
- import-templates: Load template records from a JSON file
- templates: List stored templates
- export: Render templates to docx, html, json or csv
- overlays: List known enhanced overlays
"""

import json
import os
from pathlib import Path

import typer
from rich.console import Console

from pivotlaunch.config.app_config import AppConfig, load_app_config
from pivotlaunch.core.exporter import ExportError, export_templates
from pivotlaunch.core.overlays import OverlayConfigError, load_overlays
from pivotlaunch.db.database import init_db
from pivotlaunch.db.templates_repository import (
    SqliteTemplateStore,
    get_all_templates,
    insert_templates,
)

app = typer.Typer(
    name="pnl",
    help="Pivot-and-Launch project template guide exporter.",
    no_args_is_help=True,
)

console = Console()


def _data_dir() -> Path:
    return Path(os.environ.get("PNL_DATA_DIR", "data"))


def _db_path(config: AppConfig) -> Path:
    """Database path: PNL_DB_PATH, then config paths.db_path."""
    return Path(os.environ.get("PNL_DB_PATH", str(config.db_path)))


def _overlays_path(config: AppConfig) -> Path:
    """Overlay file under PNL_DATA_DIR when set, else the configured path."""
    if "PNL_DATA_DIR" in os.environ:
        return _data_dir() / "config" / config.overlays_file.name
    return config.overlays_file


def _open_store(config: AppConfig) -> SqliteTemplateStore:
    init_db(_db_path(config))
    return SqliteTemplateStore()


def _truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


# =============================================================================
# STORE COMMANDS
# =============================================================================


@app.command(name="init-db")
def init_db_command() -> None:
    """Create the template database if it does not exist."""
    config = load_app_config()
    path = _db_path(config)
    init_db(path)
    console.print("[green]✓ Database ready[/green]")
    console.print(f"  [dim]path:[/dim] {path}")


@app.command(name="import-templates")
def import_templates(
    file: str = typer.Argument(..., help="JSON file with a list of template records"),
) -> None:
    """Import template records from a JSON file.

    Relative paths not found in the working directory are looked up
    under $PNL_DATA_DIR/templates.
    """
    source = Path(file)
    if not source.exists() and not source.is_absolute():
        source = _data_dir() / "templates" / file

    if not source.exists():
        console.print(f"[red]✗ File not found: {file}[/red]")
        raise typer.Exit(code=1)

    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]✗ Invalid JSON in {source}: {e}[/red]")
        raise typer.Exit(code=1)

    items = data.get("templates", []) if isinstance(data, dict) else data
    if not isinstance(items, list) or not all(isinstance(i, dict) and "name" in i for i in items):
        console.print("[red]✗ Expected a list of template objects with 'name'[/red]")
        raise typer.Exit(code=1)

    _open_store(load_app_config())
    ids = insert_templates(items)

    console.print(f"[green]✓ {len(ids)} template(s) imported[/green]")
    console.print(f"  [dim]ids:[/dim] {', '.join(str(i) for i in ids)}")


@app.command()
def templates() -> None:
    """List stored templates."""
    from rich.table import Table

    config = load_app_config()
    _open_store(config)
    records = get_all_templates()

    if not records:
        console.print("[yellow]⚠ No templates yet. Run: pnl import-templates FILE[/yellow]")
        return

    overlays = load_overlays(_overlays_path(config))

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", width=32)
    table.add_column("Discipline")
    table.add_column("Phases", justify="center")
    table.add_column("Overlay", justify="center")

    for record in records:
        has_overlay = "[green]✓[/green]" if overlays.lookup(record) else "[dim]-[/dim]"
        table.add_row(
            str(record.id),
            _truncate(record.name, 32),
            record.discipline,
            str(len(record.content.phases)),
            has_overlay,
        )

    console.print(table)


# =============================================================================
# EXPORT
# =============================================================================


@app.command()
def export(
    template_ids: list[int] = typer.Argument(..., help="Template ids, in document order"),
    fmt: str | None = typer.Option(None, "--format", "-f", help="docx, word-html, pdf-html, json, csv"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Output file (default: configured filename)"),
) -> None:
    """Export templates as a single guide or data dump."""
    config = load_app_config()
    store = _open_store(config)

    try:
        overlays = load_overlays(_overlays_path(config))
        result = export_templates(template_ids, fmt, store, overlays=overlays, config=config)
    except OverlayConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)
    except ExportError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    target = out or Path(result.filename)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(result.payload)

    console.print(f"[green]✓ Exported {len(result.template_ids)} template(s)[/green]")
    console.print(f"  [dim]output:[/dim] {target}")
    console.print(f"  [dim]type:[/dim]   {result.content_type}")
    console.print(f"  [dim]size:[/dim]   {len(result.payload):,} bytes")


@app.command()
def overlays() -> None:
    """List enhanced overlays (built-in and from the overlays file)."""
    config = load_app_config()
    try:
        registry = load_overlays(_overlays_path(config))
    except OverlayConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    if not len(registry):
        console.print("[yellow]⚠ No overlays defined[/yellow]")
        return

    for template_id, overlay in sorted(registry.by_id.items()):
        launch = "pivot+launch" if overlay.launch_phase else "pivot"
        console.print(f"  [cyan]#{template_id}[/cyan] ({launch})")
    for name, overlay in sorted(registry.by_name.items()):
        launch = "pivot+launch" if overlay.launch_phase else "pivot"
        console.print(f"  [cyan]{name}[/cyan] ({launch})")


if __name__ == "__main__":
    app()
