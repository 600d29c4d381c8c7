"""API routers for pastenote."""

from .health import router as health_router
from .notes import router as notes_router
from .pages import router as pages_router

__all__ = ["notes_router", "health_router", "pages_router"]
