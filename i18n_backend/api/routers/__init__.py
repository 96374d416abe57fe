"""API routers."""

from .health import router as health_router
from .translation_jobs import router as translation_jobs_router
from .translations import router as translations_router

__all__ = [
    "health_router",
    "translation_jobs_router",
    "translations_router",
]
