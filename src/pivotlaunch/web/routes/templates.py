"""Template listing and export endpoints."""

import os
from pathlib import Path

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse

from pivotlaunch.config.app_config import load_app_config
from pivotlaunch.core.exporter import (
    EmptyExportError,
    TemplateNotFoundError,
    TemplateRenderError,
    UnsupportedFormatError,
    export_templates,
)
from pivotlaunch.core.overlays import OverlayRegistry, load_overlays
from pivotlaunch.db.database import init_db
from pivotlaunch.db.templates_repository import SqliteTemplateStore
from pivotlaunch.web.schemas import (
    ExportErrorResponse,
    ExportRequest,
    TemplateDetail,
    TemplateListResponse,
    TemplateSummary,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/templates", tags=["templates"])


def get_template_store() -> SqliteTemplateStore:
    """Template store dependency (overridable in tests)."""
    config = load_app_config()
    init_db(Path(os.environ.get("PNL_DB_PATH", str(config.db_path))))
    return SqliteTemplateStore()


def get_overlay_registry() -> OverlayRegistry:
    """Overlay registry dependency (overridable in tests)."""
    return load_overlays(load_app_config().overlays_file)


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    store=Depends(get_template_store),
    overlays: OverlayRegistry = Depends(get_overlay_registry),
) -> TemplateListResponse:
    """List all active templates."""
    summaries = [
        TemplateSummary.from_record(r, has_overlay=overlays.lookup(r) is not None)
        for r in store.list_templates()
    ]
    return TemplateListResponse(templates=summaries, count=len(summaries))


@router.get("/{template_id}", response_model=TemplateDetail)
async def get_template(
    template_id: int,
    store=Depends(get_template_store),
    overlays: OverlayRegistry = Depends(get_overlay_registry),
) -> TemplateDetail:
    """Get a specific template by ID."""
    records = store.get_templates_by_ids([template_id])

    if not records:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template '{template_id}' not found",
        )

    record = records[0]
    return TemplateDetail.from_record(record, has_overlay=overlays.lookup(record) is not None)


@router.post(
    "/export",
    responses={
        404: {"description": "Unknown template id"},
        400: {"description": "Empty request or unsupported format"},
        500: {"model": ExportErrorResponse, "description": "Template failed to render"},
    },
)
async def export(
    request: ExportRequest,
    store=Depends(get_template_store),
    overlays: OverlayRegistry = Depends(get_overlay_registry),
) -> Response:
    """Export templates as one downloadable file."""
    try:
        result = export_templates(
            request.template_ids,
            request.format,
            store,
            overlays=overlays,
            filename=request.filename,
        )
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (UnsupportedFormatError, EmptyExportError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TemplateRenderError as e:
        logger.error("export_render_failed", template_id=e.template_id, error=str(e.cause))
        body = ExportErrorResponse(detail=str(e), template_id=e.template_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )

    return Response(
        content=result.payload,
        media_type=result.content_type,
        headers={"Content-Disposition": result.content_disposition},
    )
