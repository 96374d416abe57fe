"""
Translation job CRUD operations.

Provides job ledger queries and the two mutation primitives the pipeline
relies on: guarded status transitions (conditional UPDATE on the current
status) and atomic counter increments computed in SQL.

Dependencies: sqlalchemy, i18n_backend.boundary.db.models
System role: Job ledger persistence
"""

from typing import Iterable, Literal, Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.boundary.db.CRUD.base_crud import BaseCRUD
from i18n_backend.boundary.db.models import (
    ACTIVE_JOB_STATUSES,
    JobStatus,
    TranslationJobModel,
)

JobOrder = Literal["created_at.asc", "created_at.desc", "status.asc", "status.desc"]

_ORDERINGS = {
    "created_at.asc": (TranslationJobModel.created_at.asc(),),
    "created_at.desc": (TranslationJobModel.created_at.desc(),),
    "status.asc": (TranslationJobModel.status.asc(), TranslationJobModel.created_at.desc()),
    "status.desc": (TranslationJobModel.status.desc(), TranslationJobModel.created_at.desc()),
}


class TranslationJobCRUD(BaseCRUD[TranslationJobModel]):
    """
    CRUD operations for TranslationJobModel.

    Extends BaseCRUD with project-scoped listing, active-job lookup,
    guarded status transitions and counter increments.
    """

    def __init__(self) -> None:
        super().__init__(TranslationJobModel)

    async def get_active_for_project(
        self,
        session: AsyncSession,
        project_id: UUID,
    ) -> TranslationJobModel | None:
        """
        Retrieve the project's pending or running job.

        Args:
            session: Async database session
            project_id: Project UUID

        Returns:
            The active job, or None when the project is idle
        """
        stmt = (
            select(TranslationJobModel)
            .where(
                TranslationJobModel.project_id == project_id,
                TranslationJobModel.status.in_(list(ACTIVE_JOB_STATUSES)),
            )
            .order_by(TranslationJobModel.created_at.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_project(
        self,
        session: AsyncSession,
        project_id: UUID,
        statuses: Iterable[JobStatus] | None = None,
        order: JobOrder = "created_at.desc",
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[TranslationJobModel]:
        """
        List jobs of a project.

        Args:
            session: Async database session
            project_id: Project UUID
            statuses: Optional status filter
            order: Sort order
            limit: Maximum number of jobs to return
            offset: Number of jobs to skip

        Returns:
            Sequence of TranslationJobModels
        """
        stmt = select(TranslationJobModel).where(TranslationJobModel.project_id == project_id)
        if statuses:
            stmt = stmt.where(TranslationJobModel.status.in_(list(statuses)))
        stmt = stmt.order_by(*_ORDERINGS[order], TranslationJobModel.id).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_project(
        self,
        session: AsyncSession,
        project_id: UUID,
        statuses: Iterable[JobStatus] | None = None,
    ) -> int:
        """Count jobs of a project, optionally filtered by status."""
        stmt = (
            select(func.count())
            .select_from(TranslationJobModel)
            .where(TranslationJobModel.project_id == project_id)
        )
        if statuses:
            stmt = stmt.where(TranslationJobModel.status.in_(list(statuses)))
        result = await session.execute(stmt)
        return result.scalar_one()

    async def get_status(self, session: AsyncSession, id: UUID) -> JobStatus | None:
        """
        Read only the status column of a job.

        Used by the execution loop between items to observe cancellation.

        Returns:
            Current JobStatus, or None if the job does not exist
        """
        stmt = select(TranslationJobModel.status).where(TranslationJobModel.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def transition_status(
        self,
        session: AsyncSession,
        id: UUID,
        from_statuses: Iterable[JobStatus],
        to_status: JobStatus,
        **fields,
    ) -> TranslationJobModel | None:
        """
        Move a job to to_status if it is currently in one of from_statuses.

        The check and the write are one conditional UPDATE, so two writers
        racing for the same job (e.g. completion and cancellation) cannot
        both succeed.

        Args:
            session: Async database session
            id: Job UUID
            from_statuses: Statuses the job must currently have
            to_status: Target status
            **fields: Extra columns to set together with the status

        Returns:
            Updated TranslationJobModel, or None when the guard did not match
        """
        allowed = [status for status in from_statuses if status.can_transition_to(to_status)]
        if not allowed:
            return None
        stmt = (
            update(TranslationJobModel)
            .where(
                TranslationJobModel.id == id,
                TranslationJobModel.status.in_(allowed),
            )
            .values(status=to_status, **fields)
            .returning(TranslationJobModel)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment_counters(
        self,
        session: AsyncSession,
        id: UUID,
        completed: int = 0,
        failed: int = 0,
    ) -> TranslationJobModel | None:
        """
        Atomically add to the completed/failed counters.

        Increments are computed by the database (col = col + n) so
        concurrent workers of the same job never lose updates.

        Args:
            session: Async database session
            id: Job UUID
            completed: Amount added to completed_keys
            failed: Amount added to failed_keys

        Returns:
            Updated TranslationJobModel, or None if the job does not exist
        """
        stmt = (
            update(TranslationJobModel)
            .where(TranslationJobModel.id == id)
            .values(
                completed_keys=TranslationJobModel.completed_keys + completed,
                failed_keys=TranslationJobModel.failed_keys + failed,
            )
            .returning(TranslationJobModel)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


translation_job_crud = TranslationJobCRUD()
