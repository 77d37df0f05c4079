"""Liveness endpoint for the guide exporter."""

from datetime import datetime, timezone

from fastapi import APIRouter

from pivotlaunch import __version__
from pivotlaunch.core.exporter import ExportFormat
from pivotlaunch.web.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report the package version and the export formats it serves."""
    return HealthResponse(
        version=__version__,
        formats=[f.value for f in ExportFormat],
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
