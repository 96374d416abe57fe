"""
Job cancellation service.

Cancellation is a guarded status update on the job row. The execution
loop observes it before taking its next item; an in-flight provider call
is never interrupted.

Dependencies: sqlalchemy, i18n_backend.boundary.db.CRUD
System role: Cancellation Controller
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.boundary.db.base import utcnow
from i18n_backend.boundary.db.CRUD import translation_job_crud
from i18n_backend.boundary.db.models import (
    ACTIVE_JOB_STATUSES,
    JobStatus,
    TranslationJobModel,
)
from i18n_backend.core.exceptions import JobNotCancellableError, JobNotFoundError

logger = logging.getLogger(__name__)


class JobCancellationService:
    """Job cancellation orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def cancel_job(self, project_id: UUID, job_id: UUID) -> TranslationJobModel:
        """
        Cancel a pending or running job.

        Args:
            project_id: Project the job must belong to
            job_id: Job UUID

        Returns:
            TranslationJobModel: The cancelled job

        Raises:
            JobNotFoundError: Job does not exist in the project
            JobNotCancellableError: Job already reached a terminal state
        """
        job = await translation_job_crud.get_by_id(self.db, job_id)
        if job is None or job.project_id != project_id:
            raise JobNotFoundError(job_id)
        if not job.status.is_active:
            raise JobNotCancellableError(job_id, job.status.value)

        cancelled = await translation_job_crud.transition_status(
            self.db,
            job_id,
            from_statuses=ACTIVE_JOB_STATUSES,
            to_status=JobStatus.CANCELLED,
            finished_at=utcnow(),
        )
        if cancelled is None:
            # Lost the race against completion or failure
            await self.db.rollback()
            status = await translation_job_crud.get_status(self.db, job_id)
            raise JobNotCancellableError(job_id, status.value if status else "unknown")

        await self.db.commit()
        logger.info(
            "Translation job cancelled",
            extra={
                "job_id": str(job_id),
                "project_id": str(project_id),
                "completed_keys": cancelled.completed_keys,
                "failed_keys": cancelled.failed_keys,
            },
        )
        return cancelled
