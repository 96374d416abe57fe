"""
Job admission service.

Validates a translation job request, resolves its key set and creates the
job with one pending item per key in a single transaction, then hands the
job to the dispatcher without waiting for execution.

One active job per project is enforced twice: a lookup under the project
row lock gives a clean error, and the partial unique index on
translation_jobs rejects whatever slips past it (other processes, SQLite).

Dependencies: sqlalchemy, i18n_backend.boundary.db.CRUD, i18n_backend.workers
System role: Job Admission Gateway
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.boundary.db.base import utcnow
from i18n_backend.boundary.db.CRUD import (
    job_item_crud,
    key_crud,
    project_crud,
    translation_job_crud,
)
from i18n_backend.boundary.db.models import (
    JobStatus,
    TranslationJobModel,
    TranslationMode,
)
from i18n_backend.boundary.llm import TokenUsage, compute_cost, resolve_job_params
from i18n_backend.configs.settings import Settings
from i18n_backend.core.exceptions import (
    ActiveJobConflictError,
    KeyNotFoundError,
    PersistenceError,
    ProjectNotFoundError,
    ValidationError,
)
from i18n_backend.core.locales import is_valid_locale
from i18n_backend.models.translation_job import CreateTranslationJobRequest
from i18n_backend.observability.log_utils import log_with_context
from i18n_backend.workers.dispatcher import JobDispatcher

logger = logging.getLogger(__name__)

_ACTIVE_JOB_INDEX_MARKERS = (
    "translation_jobs_one_active_per_project",
    "translation_jobs.project_id",
)


@dataclass(frozen=True)
class AdmissionResult:
    job_id: UUID
    status: JobStatus


def validate_job_request(request: CreateTranslationJobRequest) -> list[UUID] | None:
    """
    Check the locale format and the mode/key_ids combination.

    Args:
        request: Job creation request

    Returns:
        De-duplicated key ids in request order, or None for mode 'all'

    Raises:
        ValidationError: If the request is malformed
    """
    if not is_valid_locale(request.target_locale):
        raise ValidationError(
            "Invalid target_locale format (expected e.g. 'pl' or 'pt-BR')",
            field="target_locale",
        )

    if request.mode is TranslationMode.ALL:
        if request.key_ids:
            raise ValidationError("key_ids must be empty when mode is 'all'", field="key_ids")
        return None

    key_ids = list(dict.fromkeys(request.key_ids or []))
    if not key_ids:
        raise ValidationError(
            f"key_ids must contain at least one key when mode is '{request.mode.value}'",
            field="key_ids",
        )
    if request.mode is TranslationMode.SINGLE and len(key_ids) != 1:
        raise ValidationError(
            "key_ids must contain exactly one key when mode is 'single'",
            field="key_ids",
        )
    return key_ids


def _is_active_job_violation(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in _ACTIVE_JOB_INDEX_MARKERS)


class JobAdmissionService:
    """Job admission orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        dispatcher: JobDispatcher,
    ) -> None:
        """
        Initialize admission service.

        Args:
            db: AsyncSession for the admission transaction
            settings: Application settings
            dispatcher: Hands admitted jobs to the execution loop
        """
        self.db = db
        self.settings = settings
        self.dispatcher = dispatcher

    def estimate_cost(self, total_keys: int) -> Decimal | None:
        """Estimated job cost from per-key token assumptions; None when unpriced."""
        provider = self.settings.provider
        usage = TokenUsage(
            input_tokens=total_keys * provider.estimated_input_tokens_per_key,
            output_tokens=total_keys * provider.estimated_output_tokens_per_key,
        )
        return compute_cost(
            usage,
            provider.input_cost_per_1k_tokens,
            provider.output_cost_per_1k_tokens,
        )

    async def create_job(self, request: CreateTranslationJobRequest) -> AdmissionResult:
        """
        Admit a translation job.

        Args:
            request: Validated request schema

        Returns:
            AdmissionResult with the new job id and status (pending, or
            completed for a project without keys)

        Raises:
            ValidationError: Malformed request, target locale equal to the
                default locale or not enabled for the project
            ProjectNotFoundError: Project does not exist
            KeyNotFoundError: Requested keys are not in the project
            ActiveJobConflictError: Project already has a pending/running job
            PersistenceError: The admission transaction failed
        """
        requested_keys = validate_job_request(request)

        try:
            job = await self._create_job_rows(request, requested_keys)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if _is_active_job_violation(e):
                log_with_context(
                    logger,
                    logging.INFO,
                    "Admission rejected by active job index",
                    project_id=request.project_id,
                )
                raise ActiveJobConflictError(request.project_id) from e
            raise PersistenceError(f"Job admission failed: {e.orig}", operation="create_job") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Job admission failed: {e}", operation="create_job") from e
        except Exception:
            await self.db.rollback()
            raise

        log_with_context(
            logger,
            logging.INFO,
            "Translation job admitted",
            job_id=job.id,
            project_id=job.project_id,
            mode=job.mode.value,
            target_locale=job.target_locale,
            total_keys=job.total_keys,
            status=job.status.value,
        )

        if job.status is JobStatus.PENDING:
            await self._dispatch(job)
        return AdmissionResult(job_id=job.id, status=job.status)

    async def _create_job_rows(
        self,
        request: CreateTranslationJobRequest,
        requested_keys: list[UUID] | None,
    ) -> TranslationJobModel:
        project = await project_crud.get_for_update(self.db, request.project_id)
        if project is None:
            raise ProjectNotFoundError(request.project_id)

        if request.target_locale == project.default_locale:
            raise ValidationError(
                "Target locale cannot be the project's default locale",
                field="target_locale",
            )
        if not await project_crud.locale_exists(self.db, project.id, request.target_locale):
            raise ValidationError(
                f"Target locale '{request.target_locale}' is not enabled for this project",
                field="target_locale",
            )

        if requested_keys is None:
            key_ids = list(await key_crud.get_ids_for_project(self.db, project.id))
        else:
            found = await key_crud.filter_ids_in_project(self.db, project.id, requested_keys)
            missing = [key_id for key_id in requested_keys if key_id not in found]
            if missing:
                raise KeyNotFoundError(
                    ", ".join(str(key_id) for key_id in missing),
                    details={"missing_key_ids": [str(key_id) for key_id in missing]},
                )
            key_ids = requested_keys

        active = await translation_job_crud.get_active_for_project(self.db, project.id)
        if active is not None:
            raise ActiveJobConflictError(project.id, active.id)

        params = resolve_job_params(self.settings.provider, request.params)
        job = await translation_job_crud.create(
            self.db,
            project_id=project.id,
            mode=request.mode,
            source_locale=project.default_locale,
            target_locale=request.target_locale,
            status=JobStatus.PENDING,
            provider=params.provider,
            model=params.model,
            params=params.model_dump(mode="json"),
            total_keys=len(key_ids),
            completed_keys=0,
            failed_keys=0,
            estimated_cost_usd=self.estimate_cost(len(key_ids)),
        )
        await job_item_crud.create_many(self.db, job.id, key_ids)

        if not key_ids:
            now = utcnow()
            job = await translation_job_crud.transition_status(
                self.db,
                job.id,
                from_statuses=[JobStatus.PENDING],
                to_status=JobStatus.COMPLETED,
                started_at=now,
                finished_at=now,
            )
        return job

    async def _dispatch(self, job: TranslationJobModel) -> None:
        """Dispatch a committed job; a job that cannot be dispatched is failed."""
        try:
            await self.dispatcher.dispatch(job.id)
        except Exception:
            logger.exception(
                "Failed to dispatch translation job",
                extra={"job_id": str(job.id), "project_id": str(job.project_id)},
            )
            await translation_job_crud.transition_status(
                self.db,
                job.id,
                from_statuses=[JobStatus.PENDING],
                to_status=JobStatus.FAILED,
                finished_at=utcnow(),
            )
            await self.db.commit()
            raise
