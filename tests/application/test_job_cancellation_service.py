"""
Test suite for JobCancellationService.

System role: Verification of the Cooperative Cancellation Controller
"""

import uuid

import pytest

from i18n_backend.application.services import JobCancellationService
from i18n_backend.boundary.db.CRUD import job_item_crud, translation_job_crud
from i18n_backend.boundary.db.models import ItemStatus, JobStatus, TranslationMode
from i18n_backend.core.exceptions import JobNotCancellableError, JobNotFoundError


@pytest.fixture
async def job_factory(seed, db_session):
    async def _create(status: JobStatus = JobStatus.PENDING):
        project = await seed(key_count=2)
        job = await translation_job_crud.create(
            db_session,
            project_id=project.project_id,
            mode=TranslationMode.ALL,
            source_locale="en",
            target_locale="pl",
            status=status,
            total_keys=2,
        )
        await job_item_crud.create_many(db_session, job.id, project.key_ids)
        await db_session.commit()
        return job

    return _create


class TestCancelJob:
    """Test suite for JobCancellationService.cancel_job()."""

    @pytest.mark.parametrize("status", [JobStatus.PENDING, JobStatus.RUNNING])
    async def test_active_job_is_cancelled(self, job_factory, db_session, status) -> None:
        """Test pending and running jobs move to cancelled with finished_at."""
        # Arrange
        job = await job_factory(status)
        service = JobCancellationService(db_session)

        # Act
        cancelled = await service.cancel_job(job.project_id, job.id)

        # Assert
        assert cancelled.status is JobStatus.CANCELLED
        assert cancelled.finished_at is not None
        assert await translation_job_crud.get_status(db_session, job.id) is JobStatus.CANCELLED

    async def test_items_are_left_untouched(self, job_factory, db_session) -> None:
        """Test cancellation does not resolve pending items."""
        job = await job_factory(JobStatus.RUNNING)

        await JobCancellationService(db_session).cancel_job(job.project_id, job.id)

        counts = await job_item_crud.count_by_status(db_session, job.id)
        assert counts[ItemStatus.PENDING] == 2

    @pytest.mark.parametrize(
        "status", [JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED]
    )
    async def test_terminal_job_is_not_cancellable(self, job_factory, db_session, status) -> None:
        job = await job_factory(status)

        with pytest.raises(JobNotCancellableError) as exc_info:
            await JobCancellationService(db_session).cancel_job(job.project_id, job.id)

        assert exc_info.value.details["status"] == status.value
        assert await translation_job_crud.get_status(db_session, job.id) is status

    async def test_job_of_another_project_is_not_found(self, job_factory, db_session) -> None:
        job = await job_factory(JobStatus.RUNNING)

        with pytest.raises(JobNotFoundError):
            await JobCancellationService(db_session).cancel_job(uuid.uuid4(), job.id)

        assert await translation_job_crud.get_status(db_session, job.id) is JobStatus.RUNNING

    async def test_unknown_job(self, db_session) -> None:
        with pytest.raises(JobNotFoundError):
            await JobCancellationService(db_session).cancel_job(uuid.uuid4(), uuid.uuid4())
