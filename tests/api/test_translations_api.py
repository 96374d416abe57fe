"""
Test suite for the translation endpoints and health checks.

System role: Verification of the translation store HTTP API
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from i18n_backend.api.deps.dependencies import get_translation_service
from i18n_backend.api.main import create_app
from i18n_backend.boundary.db.models import TranslationModel, UpdateSource
from i18n_backend.core.exceptions import TranslationConflictError, TranslationNotFoundError


@pytest.fixture
def translation_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(translation_service) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_translation_service] = lambda: translation_service
    return TestClient(app)


def _translation(project_id, key_id, locale="pl", value="Zapisz") -> TranslationModel:
    return TranslationModel(
        project_id=project_id,
        key_id=key_id,
        locale=locale,
        value=value,
        is_machine_translated=False,
        updated_source=UpdateSource.USER,
        updated_by_user_id=None,
        updated_at=datetime.now(timezone.utc),
    )


class TestTranslationEndpoints:
    """Test suite for /translations."""

    def test_get_translation(self, client, translation_service) -> None:
        project_id, key_id = uuid.uuid4(), uuid.uuid4()
        translation_service.get_translation.return_value = _translation(project_id, key_id)

        response = client.get(f"/api/v1/translations/{project_id}/{key_id}/pl")

        assert response.status_code == 200
        assert response.json()["value"] == "Zapisz"

    def test_update_with_token(self, client, translation_service) -> None:
        """Test expected_updated_at is passed through as the lock token."""
        project_id, key_id = uuid.uuid4(), uuid.uuid4()
        translation_service.update_translation.return_value = _translation(project_id, key_id)
        token = "2026-01-01T10:00:00+00:00"

        response = client.patch(
            f"/api/v1/translations/{project_id}/{key_id}/pl",
            json={"value": "Zapisz", "expected_updated_at": token},
        )

        assert response.status_code == 200
        kwargs = translation_service.update_translation.call_args.kwargs
        assert kwargs["expected_updated_at"] == datetime(2026, 1, 1, 10, tzinfo=timezone.utc)

    def test_update_conflict_is_409(self, client, translation_service) -> None:
        project_id, key_id = uuid.uuid4(), uuid.uuid4()
        translation_service.update_translation.side_effect = TranslationConflictError(
            project_id, key_id, "pl"
        )

        response = client.patch(
            f"/api/v1/translations/{project_id}/{key_id}/pl",
            json={"value": "Zapisz", "expected_updated_at": "2026-01-01T10:00:00Z"},
        )

        assert response.status_code == 409

    def test_update_missing_row_is_404(self, client, translation_service) -> None:
        project_id, key_id = uuid.uuid4(), uuid.uuid4()
        translation_service.update_translation.side_effect = TranslationNotFoundError("x")

        response = client.patch(
            f"/api/v1/translations/{project_id}/{key_id}/pl", json={"value": "Zapisz"}
        )

        assert response.status_code == 404

    def test_bulk_update(self, client, translation_service) -> None:
        project_id = uuid.uuid4()
        key_ids = [str(uuid.uuid4()), str(uuid.uuid4())]
        translation_service.bulk_update_translations.return_value = 2

        response = client.patch(
            f"/api/v1/translations/{project_id}/bulk",
            json={"locale": "pl", "key_ids": key_ids, "value": "Wkrótce"},
        )

        assert response.status_code == 200
        assert response.json() == {"updated": 2}

    def test_bulk_update_requires_keys(self, client) -> None:
        response = client.patch(
            f"/api/v1/translations/{uuid.uuid4()}/bulk",
            json={"locale": "pl", "key_ids": [], "value": "Wkrótce"},
        )

        assert response.status_code == 422


def test_health_check() -> None:
    response = TestClient(create_app()).get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_correlation_id_is_echoed() -> None:
    response = TestClient(create_app()).get(
        "/api/v1/health", headers={"X-Correlation-ID": "req-42"}
    )

    assert response.headers["X-Correlation-ID"] == "req-42"
