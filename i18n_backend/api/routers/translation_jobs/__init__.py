"""
Translation jobs router package.

Exports the router for job admission, polling and cancellation endpoints.
"""

from .translation_jobs_router import router

__all__ = ["router"]
