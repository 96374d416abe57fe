"""
Test suite for TranslationCRUD against SQLite.

System role: Verification of the optimistic-lock and bulk write paths
"""

from datetime import timedelta

from i18n_backend.boundary.db.base import ensure_utc, next_lock_token
from i18n_backend.boundary.db.CRUD import translation_crud
from i18n_backend.boundary.db.models import UpdateSource


class TestUpdateWithLock:
    """Test suite for TranslationCRUD.update_with_lock()."""

    async def test_writes_when_token_matches(self, seed, db_session) -> None:
        """Test a write with the current token succeeds and bumps updated_at."""
        # Arrange
        project = await seed(key_count=1)
        key_id = project.key_ids[0]
        current = await translation_crud.get(db_session, project.project_id, key_id, "pl")
        token = current.updated_at

        # Act
        updated = await translation_crud.update_with_lock(
            db_session,
            project.project_id,
            key_id,
            "pl",
            expected_updated_at=token,
            value="Wartość 0",
            is_machine_translated=True,
            updated_source=UpdateSource.SYSTEM,
            updated_at=next_lock_token(token),
        )

        # Assert
        assert updated is not None
        assert updated.value == "Wartość 0"
        assert updated.updated_source is UpdateSource.SYSTEM
        assert ensure_utc(updated.updated_at) > ensure_utc(token)

    async def test_stale_token_writes_nothing(self, seed, db_session) -> None:
        """Test a token older than the stored one is rejected."""
        project = await seed(key_count=1)
        key_id = project.key_ids[0]
        current = await translation_crud.get(db_session, project.project_id, key_id, "pl")

        updated = await translation_crud.update_with_lock(
            db_session,
            project.project_id,
            key_id,
            "pl",
            expected_updated_at=ensure_utc(current.updated_at) - timedelta(seconds=1),
            value="Nadpisane",
        )

        assert updated is None
        row = await translation_crud.get(db_session, project.project_id, key_id, "pl")
        assert row.value is None

    async def test_missing_row_writes_nothing(self, seed, db_session) -> None:
        project = await seed(key_count=1, locales=("en", "pl", "de"), missing_target_keys=(0,))

        updated = await translation_crud.update_with_lock(
            db_session,
            project.project_id,
            project.key_ids[0],
            "de",
            expected_updated_at=next_lock_token(None),
            value="Wert",
        )

        assert updated is None


class TestBulkUpdate:
    """Test suite for TranslationCRUD.bulk_update()."""

    async def test_updates_only_listed_keys_of_locale(self, seed, db_session) -> None:
        project = await seed(key_count=3)

        count = await translation_crud.bulk_update(
            db_session,
            project.project_id,
            "pl",
            project.key_ids[:2],
            value="Do przetłumaczenia",
            updated_at=next_lock_token(None),
        )

        assert count == 2
        third = await translation_crud.get(db_session, project.project_id, project.key_ids[2], "pl")
        source = await translation_crud.get(db_session, project.project_id, project.key_ids[0], "en")
        assert third.value is None
        assert source.value == "Value 0"

    async def test_empty_key_list_is_a_no_op(self, seed, db_session) -> None:
        project = await seed(key_count=1)

        assert await translation_crud.bulk_update(db_session, project.project_id, "pl", []) == 0
