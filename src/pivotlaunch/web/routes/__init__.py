"""Route handlers for the Web API."""

from pivotlaunch.web.routes.health import router as health_router
from pivotlaunch.web.routes.templates import router as templates_router

__all__ = [
    "health_router",
    "templates_router",
]
