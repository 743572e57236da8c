"""API routers."""

from .advanced import router as advanced_router
from .events import router as events_router
from .health import router as health_router
from .sessions import router as sessions_router
from .upload import router as upload_router

__all__ = [
    "advanced_router",
    "events_router",
    "health_router",
    "sessions_router",
    "upload_router",
]
