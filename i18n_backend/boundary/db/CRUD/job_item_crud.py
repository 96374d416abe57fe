"""
Translation job item CRUD operations.

Provides bulk creation at admission, paginated listing for the status
reader and the single resolve transition used by the execution loop.

Dependencies: sqlalchemy, i18n_backend.boundary.db.models
System role: Job item tracker persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.boundary.db.CRUD.base_crud import BaseCRUD
from i18n_backend.boundary.db.models import ItemStatus, TranslationJobItemModel


class JobItemCRUD(BaseCRUD[TranslationJobItemModel]):
    """CRUD operations for TranslationJobItemModel."""

    def __init__(self) -> None:
        super().__init__(TranslationJobItemModel)

    async def create_many(
        self,
        session: AsyncSession,
        job_id: UUID,
        key_ids: Sequence[UUID],
    ) -> list[TranslationJobItemModel]:
        """
        Create one pending item per key.

        Args:
            session: Async database session
            job_id: Owning job UUID
            key_ids: Keys of the job, already de-duplicated

        Returns:
            Created items in key order
        """
        items = [
            TranslationJobItemModel(job_id=job_id, key_id=key_id, status=ItemStatus.PENDING)
            for key_id in key_ids
        ]
        session.add_all(items)
        await session.flush()
        return items

    def _job_filter(self, stmt, job_id: UUID, status: ItemStatus | None):
        stmt = stmt.where(TranslationJobItemModel.job_id == job_id)
        if status is not None:
            stmt = stmt.where(TranslationJobItemModel.status == status)
        return stmt

    async def list_for_job(
        self,
        session: AsyncSession,
        job_id: UUID,
        status: ItemStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[TranslationJobItemModel]:
        """
        List items of a job in creation order.

        Args:
            session: Async database session
            job_id: Job UUID
            status: Optional status filter
            limit: Maximum number of items to return
            offset: Number of items to skip

        Returns:
            Sequence of TranslationJobItemModels
        """
        stmt = self._job_filter(select(TranslationJobItemModel), job_id, status)
        stmt = stmt.order_by(
            TranslationJobItemModel.created_at,
            TranslationJobItemModel.id,
        ).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_job(
        self,
        session: AsyncSession,
        job_id: UUID,
        status: ItemStatus | None = None,
    ) -> int:
        """Count items of a job, optionally filtered by status."""
        stmt = self._job_filter(
            select(func.count()).select_from(TranslationJobItemModel),
            job_id,
            status,
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def get_pending_for_job(
        self,
        session: AsyncSession,
        job_id: UUID,
    ) -> Sequence[TranslationJobItemModel]:
        """Retrieve all pending items of a job in creation order."""
        return await self.list_for_job(session, job_id, status=ItemStatus.PENDING)

    async def count_by_status(
        self,
        session: AsyncSession,
        job_id: UUID,
    ) -> dict[ItemStatus, int]:
        """
        Count items of a job grouped by status.

        Returns:
            Mapping with an entry for every ItemStatus (zero when absent)
        """
        stmt = (
            select(TranslationJobItemModel.status, func.count())
            .where(TranslationJobItemModel.job_id == job_id)
            .group_by(TranslationJobItemModel.status)
        )
        result = await session.execute(stmt)
        counts = {status: 0 for status in ItemStatus}
        for status, count in result.all():
            counts[ItemStatus(status)] = count
        return counts

    async def resolve(
        self,
        session: AsyncSession,
        item_id: UUID,
        status: ItemStatus,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> TranslationJobItemModel | None:
        """
        Move a pending item to a terminal status.

        Args:
            session: Async database session
            item_id: Item UUID
            status: Terminal status
            error_code: Error code for failed/skipped items
            error_message: Error detail for failed/skipped items

        Returns:
            Updated item, or None when the item was not pending

        Raises:
            ValueError: If status is not terminal
        """
        if not ItemStatus.PENDING.can_transition_to(status):
            raise ValueError(f"Cannot resolve item to {status.value}")
        stmt = (
            update(TranslationJobItemModel)
            .where(
                TranslationJobItemModel.id == item_id,
                TranslationJobItemModel.status == ItemStatus.PENDING,
            )
            .values(status=status, error_code=error_code, error_message=error_message)
            .returning(TranslationJobItemModel)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


job_item_crud = JobItemCRUD()
