"""
Translation job Celery task.

Task: run_translation_job(job_id)
Flow: own engine -> TranslationJobExecutor.run -> dispose engine

Each task runs in a fresh event loop, so it builds its own engine instead
of reusing the process-wide cached one.

Dependencies: celery, i18n_backend.core.job_execution, i18n_backend.workers
System role: Out-of-process execution of translation jobs
"""

import asyncio
import logging
from uuid import UUID

from i18n_backend.boundary.db.connection import build_async_engine, create_session_factory
from i18n_backend.configs import get_settings
from i18n_backend.core.job_execution import TranslationJobExecutor
from i18n_backend.workers import celery_app

logger = logging.getLogger(__name__)


async def _execute(job_id: UUID) -> dict:
    settings = get_settings()
    engine = build_async_engine(settings.database)
    try:
        executor = TranslationJobExecutor(create_session_factory(engine), settings)
        summary = await executor.run(job_id)
    finally:
        await engine.dispose()
    return {
        "job_id": str(summary.job_id),
        "status": summary.status.value if summary.status else None,
        "processed": summary.processed,
    }


@celery_app.task(bind=True, name="translation_jobs.run")
def run_translation_job(self, job_id: str) -> dict:
    """
    Run one translation job to a terminal state.

    Args:
        job_id: Job UUID as string

    Returns:
        dict: Final status and number of items processed
    """
    logger.info(
        f"{__name__}:run_translation_job - Starting",
        extra={"job_id": job_id, "task_id": self.request.id},
    )
    return asyncio.run(_execute(UUID(job_id)))
