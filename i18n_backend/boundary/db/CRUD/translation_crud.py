"""
Translation CRUD operations.

The write path of the shared translation store. update_with_lock is the
optimistic-concurrency write: a single conditional UPDATE that only
matches when the stored updated_at equals the token the writer observed.
bulk_update skips the token check and can overwrite concurrent edits.

Dependencies: sqlalchemy, i18n_backend.boundary.db.models
System role: Translation store persistence
"""

from datetime import datetime
from typing import Iterable
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.boundary.db.models import TranslationModel


class TranslationCRUD:
    """
    CRUD operations for TranslationModel.

    Translations use a composite primary key, so this class does not
    extend BaseCRUD.
    """

    model = TranslationModel

    @staticmethod
    def _pk_filter(project_id: UUID, key_id: UUID, locale: str) -> tuple:
        return (
            TranslationModel.project_id == project_id,
            TranslationModel.key_id == key_id,
            TranslationModel.locale == locale,
        )

    async def get(
        self,
        session: AsyncSession,
        project_id: UUID,
        key_id: UUID,
        locale: str,
    ) -> TranslationModel | None:
        """
        Retrieve one translation row.

        Args:
            session: Async database session
            project_id: Project UUID
            key_id: Key UUID
            locale: Locale code

        Returns:
            TranslationModel if the row exists, None otherwise
        """
        stmt = select(TranslationModel).where(*self._pk_filter(project_id, key_id, locale))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_with_lock(
        self,
        session: AsyncSession,
        project_id: UUID,
        key_id: UUID,
        locale: str,
        expected_updated_at: datetime,
        **values,
    ) -> TranslationModel | None:
        """
        Conditionally update a translation row.

        The row is updated only when its current updated_at equals
        expected_updated_at. values must include the new updated_at.

        Args:
            session: Async database session
            project_id: Project UUID
            key_id: Key UUID
            locale: Locale code
            expected_updated_at: Lock token the writer last observed
            **values: Column values to write

        Returns:
            Updated TranslationModel, or None when no row matched
            (missing row or stale token)
        """
        stmt = (
            update(TranslationModel)
            .where(
                *self._pk_filter(project_id, key_id, locale),
                TranslationModel.updated_at == expected_updated_at,
            )
            .values(**values)
            .returning(TranslationModel)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_unchecked(
        self,
        session: AsyncSession,
        project_id: UUID,
        key_id: UUID,
        locale: str,
        **values,
    ) -> TranslationModel | None:
        """Update a translation row without comparing lock tokens."""
        stmt = (
            update(TranslationModel)
            .where(*self._pk_filter(project_id, key_id, locale))
            .values(**values)
            .returning(TranslationModel)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def bulk_update(
        self,
        session: AsyncSession,
        project_id: UUID,
        locale: str,
        key_ids: Iterable[UUID],
        **values,
    ) -> int:
        """
        Update many rows of one locale in a single statement.

        No per-row token check is made: a concurrent manual edit to any of
        the rows is overwritten.

        Args:
            session: Async database session
            project_id: Project UUID
            locale: Locale code
            key_ids: Keys whose rows are updated
            **values: Column values to write

        Returns:
            Number of rows updated
        """
        ids = list(key_ids)
        if not ids:
            return 0
        stmt = (
            update(TranslationModel)
            .where(
                TranslationModel.project_id == project_id,
                TranslationModel.locale == locale,
                TranslationModel.key_id.in_(ids),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount


translation_crud = TranslationCRUD()
