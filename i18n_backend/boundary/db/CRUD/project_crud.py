"""
Project, locale and key CRUD operations.

Read-only lookups used by job admission to check project existence,
target locale membership and key ownership.

Dependencies: sqlalchemy, i18n_backend.boundary.db.models
System role: Project catalog queries for admission
"""

from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.boundary.db.CRUD.base_crud import BaseCRUD
from i18n_backend.boundary.db.models import KeyModel, ProjectLocaleModel, ProjectModel


class ProjectCRUD(BaseCRUD[ProjectModel]):
    """CRUD operations for ProjectModel."""

    def __init__(self) -> None:
        super().__init__(ProjectModel)

    async def get_for_update(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> ProjectModel | None:
        """
        Retrieve a project and lock its row until the transaction ends.

        Serializes concurrent admissions for the same project on
        PostgreSQL (SELECT ... FOR UPDATE). SQLite ignores the lock clause.

        Args:
            session: Async database session
            id: Project UUID

        Returns:
            ProjectModel if found, None otherwise
        """
        stmt = select(ProjectModel).where(ProjectModel.id == id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def locale_exists(
        self,
        session: AsyncSession,
        project_id: UUID,
        locale: str,
    ) -> bool:
        """Check whether locale is enabled for the project."""
        stmt = select(ProjectLocaleModel.locale).where(
            ProjectLocaleModel.project_id == project_id,
            ProjectLocaleModel.locale == locale,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None


class KeyCRUD(BaseCRUD[KeyModel]):
    """CRUD operations for KeyModel."""

    def __init__(self) -> None:
        super().__init__(KeyModel)

    async def get_ids_for_project(
        self,
        session: AsyncSession,
        project_id: UUID,
    ) -> Sequence[UUID]:
        """
        Retrieve every key id of a project.

        Args:
            session: Async database session
            project_id: Project UUID

        Returns:
            Key ids ordered by key name
        """
        stmt = (
            select(KeyModel.id)
            .where(KeyModel.project_id == project_id)
            .order_by(KeyModel.name, KeyModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def filter_ids_in_project(
        self,
        session: AsyncSession,
        project_id: UUID,
        key_ids: Iterable[UUID],
    ) -> set[UUID]:
        """
        Return the subset of key_ids that belong to the project.

        Args:
            session: Async database session
            project_id: Project UUID
            key_ids: Candidate key ids

        Returns:
            Set of ids that exist in the project
        """
        ids = list(key_ids)
        if not ids:
            return set()
        stmt = select(KeyModel.id).where(
            KeyModel.project_id == project_id,
            KeyModel.id.in_(ids),
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())


project_crud = ProjectCRUD()
key_crud = KeyCRUD()
