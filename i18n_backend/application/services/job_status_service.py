"""
Job status service.

Read paths used by polling clients: the active job of a project, a
single job, job history and per-key item outcomes. Plain filtered
queries; no locking.

Dependencies: sqlalchemy, i18n_backend.boundary.db.CRUD, i18n_backend.models
System role: Status Reader
"""

from typing import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.boundary.db.CRUD import JobOrder, job_item_crud, translation_job_crud
from i18n_backend.boundary.db.models import ItemStatus, JobStatus, TranslationJobModel
from i18n_backend.configs.jobs import JobSettings
from i18n_backend.core.exceptions import JobNotFoundError, ValidationError
from i18n_backend.models.common import PaginatedResponse
from i18n_backend.models.translation_job import (
    TranslationJobItemResponse,
    TranslationJobResponse,
)


def _page_bounds(limit: int | None, offset: int, default: int, maximum: int) -> tuple[int, int]:
    if limit is None:
        limit = default
    if limit < 1:
        raise ValidationError("limit must be at least 1", field="limit")
    if offset < 0:
        raise ValidationError("offset cannot be negative", field="offset")
    return min(limit, maximum), offset


class JobStatusService:
    """Status reader for translation jobs and their items."""

    def __init__(self, db: AsyncSession, settings: JobSettings) -> None:
        """
        Initialize status service.

        Args:
            db: AsyncSession for read queries
            settings: Job settings (pagination defaults and limits)
        """
        self.db = db
        self.settings = settings

    async def get_active_job(self, project_id: UUID) -> TranslationJobModel | None:
        """Return the project's pending or running job, if any."""
        return await translation_job_crud.get_active_for_project(self.db, project_id)

    async def get_job(self, job_id: UUID, project_id: UUID | None = None) -> TranslationJobModel:
        """
        Get a job by ID.

        Args:
            job_id: Job UUID
            project_id: When given, the job must belong to this project

        Raises:
            JobNotFoundError: If the job does not exist (in the project)
        """
        job = await translation_job_crud.get_by_id(self.db, job_id)
        if job is None or (project_id is not None and job.project_id != project_id):
            raise JobNotFoundError(job_id)
        return job

    async def list_jobs(
        self,
        project_id: UUID,
        statuses: Iterable[JobStatus] | None = None,
        order: JobOrder = "created_at.desc",
        limit: int | None = None,
        offset: int = 0,
    ) -> PaginatedResponse[TranslationJobResponse]:
        """
        List a project's jobs, newest first by default.

        Args:
            project_id: Project UUID
            statuses: Optional status filter
            order: created_at.asc|desc or status.asc|desc
            limit: Page size (default 20, capped at 100)
            offset: Number of jobs to skip

        Returns:
            PaginatedResponse of TranslationJobResponse
        """
        limit, offset = _page_bounds(
            limit, offset, self.settings.default_jobs_limit, self.settings.max_jobs_limit
        )
        statuses = list(statuses) if statuses else None
        jobs = await translation_job_crud.list_for_project(
            self.db, project_id, statuses=statuses, order=order, limit=limit, offset=offset
        )
        total = await translation_job_crud.count_for_project(self.db, project_id, statuses=statuses)
        return PaginatedResponse[TranslationJobResponse].build(
            items=[TranslationJobResponse.model_validate(job) for job in jobs],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def list_job_items(
        self,
        job_id: UUID,
        status: ItemStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> PaginatedResponse[TranslationJobItemResponse]:
        """
        List a job's items in creation order.

        Args:
            job_id: Job UUID
            status: Optional item status filter
            limit: Page size (default 100, capped at 1000)
            offset: Number of items to skip

        Returns:
            PaginatedResponse of TranslationJobItemResponse

        Raises:
            JobNotFoundError: If the job does not exist
        """
        if not await translation_job_crud.exists(self.db, job_id):
            raise JobNotFoundError(job_id)
        limit, offset = _page_bounds(
            limit, offset, self.settings.default_items_limit, self.settings.max_items_limit
        )
        items = await job_item_crud.list_for_job(
            self.db, job_id, status=status, limit=limit, offset=offset
        )
        total = await job_item_crud.count_for_job(self.db, job_id, status=status)
        return PaginatedResponse[TranslationJobItemResponse].build(
            items=[TranslationJobItemResponse.model_validate(item) for item in items],
            total=total,
            limit=limit,
            offset=offset,
        )
