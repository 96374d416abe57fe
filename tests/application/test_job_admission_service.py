"""
Test suite for JobAdmissionService.

Runs against SQLite with a recording dispatcher; execution is not started.

System role: Verification of the Job Admission Gateway
"""

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from i18n_backend.application.services import JobAdmissionService
from i18n_backend.boundary.db.CRUD import job_item_crud, translation_job_crud
from i18n_backend.boundary.db.models import (
    ItemStatus,
    JobStatus,
    TranslationJobItemModel,
    TranslationJobModel,
    TranslationMode,
)
from i18n_backend.core.exceptions import (
    ActiveJobConflictError,
    KeyNotFoundError,
    ProjectNotFoundError,
    ValidationError,
)
from i18n_backend.models.translation_job import BedrockJobParams, CreateTranslationJobRequest


def _request(project_id, mode="all", key_ids=None, target_locale="pl", params=None):
    return CreateTranslationJobRequest(
        project_id=project_id,
        mode=mode,
        target_locale=target_locale,
        key_ids=key_ids,
        params=params,
    )


async def _job_count(session) -> int:
    return await session.scalar(select(func.count()).select_from(TranslationJobModel))


async def _item_count(session) -> int:
    return await session.scalar(select(func.count()).select_from(TranslationJobItemModel))


@pytest.fixture
def admission(db_session, settings, dispatcher) -> JobAdmissionService:
    return JobAdmissionService(db=db_session, settings=settings, dispatcher=dispatcher)


class TestCreateJob:
    """Test suite for JobAdmissionService.create_job()."""

    async def test_all_mode_creates_pending_job_with_items(
        self, seed, admission, db_session, dispatcher
    ) -> None:
        """Test a job over every key is created pending and dispatched."""
        # Arrange
        project = await seed(key_count=3)

        # Act
        result = await admission.create_job(_request(project.project_id))

        # Assert
        assert result.status is JobStatus.PENDING
        assert dispatcher.dispatched == [result.job_id]
        job = await translation_job_crud.get_by_id(db_session, result.job_id)
        assert job.mode is TranslationMode.ALL
        assert job.source_locale == "en"
        assert job.target_locale == "pl"
        assert (job.total_keys, job.completed_keys, job.failed_keys) == (3, 0, 0)
        assert job.provider == "google_genai"
        assert job.model == "gemini-test"
        assert job.estimated_cost_usd is None
        items = await job_item_crud.list_for_job(db_session, result.job_id)
        assert {item.key_id for item in items} == set(project.key_ids)
        assert all(item.status is ItemStatus.PENDING for item in items)

    async def test_selected_mode_uses_requested_keys_once(self, seed, admission, db_session) -> None:
        project = await seed(key_count=3)
        first, second = project.key_ids[0], project.key_ids[2]

        result = await admission.create_job(
            _request(project.project_id, mode="selected", key_ids=[first, second, first])
        )

        job = await translation_job_crud.get_by_id(db_session, result.job_id)
        items = await job_item_crud.list_for_job(db_session, result.job_id)
        assert job.total_keys == 2
        assert {item.key_id for item in items} == {first, second}

    async def test_params_are_resolved_and_stored(self, seed, admission, db_session) -> None:
        """Test partial params are completed from settings before storage."""
        project = await seed(key_count=1)

        result = await admission.create_job(
            _request(project.project_id, params=BedrockJobParams(model="amazon.nova-lite"))
        )

        job = await translation_job_crud.get_by_id(db_session, result.job_id)
        assert job.provider == "bedrock"
        assert job.model == "amazon.nova-lite"
        assert job.params["region"] == admission.settings.provider.region
        assert job.params["temperature"] == admission.settings.provider.temperature

    async def test_estimated_cost_when_priced(self, seed, admission, db_session) -> None:
        """Test 3 keys x (100 in + 20 out tokens) at 0.10/0.40 per 1k = 0.054."""
        admission.settings.provider.input_cost_per_1k_tokens = Decimal("0.10")
        admission.settings.provider.output_cost_per_1k_tokens = Decimal("0.40")
        project = await seed(key_count=3)

        result = await admission.create_job(_request(project.project_id))

        job = await translation_job_crud.get_by_id(db_session, result.job_id)
        assert job.estimated_cost_usd == Decimal("0.0540")

    async def test_project_without_keys_completes_immediately(
        self, seed, admission, db_session, dispatcher
    ) -> None:
        """Test an empty job is completed at admission and never dispatched."""
        project = await seed(key_count=0)

        result = await admission.create_job(_request(project.project_id))

        assert result.status is JobStatus.COMPLETED
        assert dispatcher.dispatched == []
        job = await translation_job_crud.get_by_id(db_session, result.job_id)
        assert job.total_keys == 0
        assert job.started_at is not None
        assert job.finished_at is not None


class TestAdmissionRejections:
    """Test suite for requests that must leave no rows behind."""

    async def test_unknown_project(self, admission, db_session) -> None:
        with pytest.raises(ProjectNotFoundError):
            await admission.create_job(_request(uuid.uuid4()))
        assert await _job_count(db_session) == 0

    async def test_target_equal_to_default_locale(self, seed, admission, db_session) -> None:
        project = await seed(key_count=1)

        with pytest.raises(ValidationError) as exc_info:
            await admission.create_job(_request(project.project_id, target_locale="en"))

        assert exc_info.value.field == "target_locale"
        assert await _job_count(db_session) == 0

    async def test_target_locale_not_enabled(self, seed, admission, db_session) -> None:
        project = await seed(key_count=1)

        with pytest.raises(ValidationError):
            await admission.create_job(_request(project.project_id, target_locale="de"))

        assert await _job_count(db_session) == 0

    async def test_keys_from_another_project(self, seed, admission, db_session) -> None:
        """Test one foreign key rejects the whole request."""
        project = await seed(key_count=2)
        other = await seed(key_count=1)
        foreign = other.key_ids[0]

        with pytest.raises(KeyNotFoundError) as exc_info:
            await admission.create_job(
                _request(
                    project.project_id,
                    mode="selected",
                    key_ids=[project.key_ids[0], foreign],
                )
            )

        assert exc_info.value.details["missing_key_ids"] == [str(foreign)]
        assert await _job_count(db_session) == 0
        assert await _item_count(db_session) == 0

    async def test_selected_mode_without_keys_creates_no_rows(
        self, seed, admission, db_session, dispatcher
    ) -> None:
        """Test an empty selection is rejected before any job or item is written."""
        # Arrange
        project = await seed(key_count=2)

        # Act
        with pytest.raises(ValidationError) as exc_info:
            await admission.create_job(_request(project.project_id, mode="selected", key_ids=[]))

        # Assert
        assert exc_info.value.field == "key_ids"
        assert await _job_count(db_session) == 0
        assert await _item_count(db_session) == 0
        assert dispatcher.dispatched == []

    async def test_active_job_conflict(self, seed, admission, db_session, dispatcher) -> None:
        """Test a second job for a project with a pending job is rejected."""
        project = await seed(key_count=2)
        first = await admission.create_job(_request(project.project_id))

        with pytest.raises(ActiveJobConflictError) as exc_info:
            await admission.create_job(_request(project.project_id, mode="single", key_ids=[project.key_ids[0]]))

        assert exc_info.value.details["active_job_id"] == str(first.job_id)
        assert await _job_count(db_session) == 1
        assert await _item_count(db_session) == 2
        assert dispatcher.dispatched == [first.job_id]

    async def test_index_rejects_job_that_slips_past_lookup(
        self, seed, admission, db_session, monkeypatch
    ) -> None:
        """Test a concurrent admission losing the race still gets a conflict."""
        project = await seed(key_count=2)
        await admission.create_job(_request(project.project_id))
        monkeypatch.setattr(
            translation_job_crud,
            "get_active_for_project",
            AsyncMock(return_value=None),
        )

        with pytest.raises(ActiveJobConflictError):
            await admission.create_job(_request(project.project_id))

        assert await _job_count(db_session) == 1
        assert await _item_count(db_session) == 2

    async def test_new_job_allowed_after_previous_finished(
        self, seed, admission, db_session
    ) -> None:
        project = await seed(key_count=1)
        first = await admission.create_job(_request(project.project_id))
        await translation_job_crud.transition_status(
            db_session, first.job_id, [JobStatus.PENDING], JobStatus.CANCELLED
        )
        await db_session.commit()

        second = await admission.create_job(_request(project.project_id))

        assert second.job_id != first.job_id
        assert second.status is JobStatus.PENDING


class TestDispatchFailure:
    """Test suite for dispatcher failures after commit."""

    async def test_undispatchable_job_is_failed(
        self, seed, db_session, settings, make_dispatcher
    ) -> None:
        """Test a job that cannot be handed off does not block the project."""
        project = await seed(key_count=1)
        admission = JobAdmissionService(
            db=db_session,
            settings=settings,
            dispatcher=make_dispatcher(error=RuntimeError("broker unavailable")),
        )

        with pytest.raises(RuntimeError):
            await admission.create_job(_request(project.project_id))

        jobs = (await db_session.execute(select(TranslationJobModel))).scalars().all()
        assert len(jobs) == 1
        assert jobs[0].status is JobStatus.FAILED
        assert jobs[0].finished_at is not None
