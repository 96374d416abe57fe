"""
Translation service orchestrator.

Manual write path into the shared translation store. Writes that carry
expected_updated_at use the optimistic lock and fail with a conflict when
the row changed since the caller read it; the bulk path has no token
check and overwrites concurrent edits.

Dependencies: sqlalchemy, i18n_backend.boundary.db.CRUD
System role: Translation Store write path
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.boundary.db.base import ensure_utc, next_lock_token, utcnow
from i18n_backend.boundary.db.CRUD import project_crud, translation_crud
from i18n_backend.boundary.db.models import TranslationModel, UpdateSource
from i18n_backend.core.exceptions import (
    ProjectNotFoundError,
    TranslationConflictError,
    TranslationNotFoundError,
    ValidationError,
)
from i18n_backend.core.locales import normalize_locale
from i18n_backend.core.values import DEFAULT_MAX_VALUE_LENGTH, normalize_value

logger = logging.getLogger(__name__)


class TranslationService:
    """Translation read/write orchestrator."""

    def __init__(self, db: AsyncSession, max_value_length: int = DEFAULT_MAX_VALUE_LENGTH) -> None:
        """
        Initialize translation service.

        Args:
            db: Async SQLAlchemy session
            max_value_length: Maximum stored value length
        """
        self.db = db
        self.max_value_length = max_value_length

    async def get_translation(
        self,
        project_id: UUID,
        key_id: UUID,
        locale: str,
    ) -> TranslationModel:
        """
        Get one translation row.

        Raises:
            TranslationNotFoundError: If the row does not exist
        """
        locale = normalize_locale(locale)
        translation = await translation_crud.get(self.db, project_id, key_id, locale)
        if translation is None:
            raise TranslationNotFoundError(f"{project_id}/{key_id}/{locale}")
        return translation

    async def _prepare_value(self, project_id: UUID, locale: str, value: str | None) -> str | None:
        project = await project_crud.get_by_id(self.db, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        normalized = normalize_value(value, self.max_value_length)
        if normalized is None and locale == project.default_locale:
            raise ValidationError(
                "Default locale value cannot be empty",
                field="value",
            )
        return normalized

    async def update_translation(
        self,
        project_id: UUID,
        key_id: UUID,
        locale: str,
        value: str | None,
        is_machine_translated: bool = False,
        updated_source: UpdateSource = UpdateSource.USER,
        updated_by_user_id: UUID | None = None,
        expected_updated_at: datetime | None = None,
    ) -> TranslationModel:
        """
        Write one translation value.

        Args:
            project_id: Project UUID
            key_id: Key UUID
            locale: Locale code
            value: New value (trimmed; empty clears it)
            is_machine_translated: Whether the value is machine output
            updated_source: USER or SYSTEM
            updated_by_user_id: Editing user
            expected_updated_at: Lock token from the caller's last read;
                None writes without a concurrency check

        Returns:
            TranslationModel: The updated row with its new updated_at

        Raises:
            ValidationError: Value violates storage rules
            ProjectNotFoundError: Project does not exist
            TranslationNotFoundError: Row does not exist
            TranslationConflictError: Row changed since expected_updated_at
        """
        locale = normalize_locale(locale)
        normalized = await self._prepare_value(project_id, locale, value)
        values = {
            "value": normalized,
            "is_machine_translated": is_machine_translated,
            "updated_source": updated_source,
            "updated_by_user_id": updated_by_user_id,
        }

        if expected_updated_at is None:
            current = await translation_crud.get(self.db, project_id, key_id, locale)
            if current is None:
                raise TranslationNotFoundError(f"{project_id}/{key_id}/{locale}")
            updated = await translation_crud.update_unchecked(
                self.db,
                project_id,
                key_id,
                locale,
                updated_at=next_lock_token(current.updated_at),
                **values,
            )
        else:
            token = ensure_utc(expected_updated_at)
            updated = await translation_crud.update_with_lock(
                self.db,
                project_id,
                key_id,
                locale,
                expected_updated_at=token,
                updated_at=next_lock_token(token),
                **values,
            )
            if updated is None:
                await self.db.rollback()
                if await translation_crud.get(self.db, project_id, key_id, locale) is None:
                    raise TranslationNotFoundError(f"{project_id}/{key_id}/{locale}")
                logger.info(
                    "Translation write rejected by optimistic lock",
                    extra={
                        "project_id": str(project_id),
                        "key_id": str(key_id),
                        "locale": locale,
                    },
                )
                raise TranslationConflictError(project_id, key_id, locale)

        if updated is None:
            await self.db.rollback()
            raise TranslationNotFoundError(f"{project_id}/{key_id}/{locale}")

        await self.db.commit()
        return updated

    async def bulk_update_translations(
        self,
        project_id: UUID,
        locale: str,
        key_ids: list[UUID],
        value: str | None,
        is_machine_translated: bool = False,
        updated_source: UpdateSource = UpdateSource.USER,
        updated_by_user_id: UUID | None = None,
    ) -> int:
        """
        Set the same value for many keys of one locale in one statement.

        No lock tokens are checked: concurrent edits to the same rows are
        overwritten. Use update_translation when that is not acceptable.

        Returns:
            int: Number of rows updated
        """
        locale = normalize_locale(locale)
        normalized = await self._prepare_value(project_id, locale, value)
        key_ids = list(dict.fromkeys(key_ids))
        if not key_ids:
            raise ValidationError("key_ids must contain at least one key", field="key_ids")

        updated = await translation_crud.bulk_update(
            self.db,
            project_id,
            locale,
            key_ids,
            value=normalized,
            is_machine_translated=is_machine_translated,
            updated_source=updated_source,
            updated_by_user_id=updated_by_user_id,
            updated_at=utcnow(),
        )
        await self.db.commit()
        logger.info(
            "Bulk translation update",
            extra={
                "project_id": str(project_id),
                "locale": locale,
                "requested": len(key_ids),
                "updated": updated,
            },
        )
        return updated
