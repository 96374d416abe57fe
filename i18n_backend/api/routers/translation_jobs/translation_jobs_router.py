"""
Translation job API endpoints.

Routes:
- POST /translation-jobs - Admit a job (202, runs in the background)
- GET /translation-jobs - List a project's jobs
- GET /translation-jobs/active - Active job of a project (0 or 1)
- GET /translation-jobs/{id} - Get single job
- GET /translation-jobs/{id}/items - List job items
- POST /translation-jobs/{id}/cancel - Cancel a pending/running job

Dependencies: i18n_backend.application.services, i18n_backend.models
System role: Translation job HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from i18n_backend.api.deps.dependencies import (
    get_job_admission_service,
    get_job_cancellation_service,
    get_job_status_service,
)
from i18n_backend.api.routers.router_utils import handle_translation_errors
from i18n_backend.application.services import (
    JobAdmissionService,
    JobCancellationService,
    JobStatusService,
)
from i18n_backend.boundary.db.CRUD import JobOrder
from i18n_backend.boundary.db.models import ItemStatus, JobStatus
from i18n_backend.models.common import ErrorResponse, PaginatedResponse
from i18n_backend.models.translation_job import (
    CancelTranslationJobRequest,
    CreateTranslationJobRequest,
    CreateTranslationJobResponse,
    TranslationJobItemResponse,
    TranslationJobResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translation-jobs", tags=["translation-jobs"])


@router.post(
    "",
    response_model=CreateTranslationJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
@handle_translation_errors
async def create_translation_job(
    request: CreateTranslationJobRequest,
    admission_service: JobAdmissionService = Depends(get_job_admission_service),
) -> CreateTranslationJobResponse:
    """
    Admit a translation job and start it in the background.

    Args:
        request: Project, mode, target locale, optional key ids and params
        admission_service: Injected JobAdmissionService

    Returns:
        CreateTranslationJobResponse: Job id and initial status

    Raises:
        HTTPException(400): Invalid request
        HTTPException(404): Project or keys not found
        HTTPException(409): Another job is active for the project
    """
    logger.info(
        "Creating translation job",
        extra={
            "project_id": str(request.project_id),
            "mode": request.mode.value,
            "target_locale": request.target_locale,
        },
    )
    result = await admission_service.create_job(request)
    return CreateTranslationJobResponse(job_id=result.job_id, status=result.status)


@router.get("", response_model=PaginatedResponse[TranslationJobResponse])
@handle_translation_errors
async def list_translation_jobs(
    project_id: UUID,
    job_status: list[JobStatus] | None = Query(None, alias="status"),
    order: JobOrder = "created_at.desc",
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    status_service: JobStatusService = Depends(get_job_status_service),
) -> PaginatedResponse[TranslationJobResponse]:
    """
    List a project's jobs.

    Args:
        project_id: Project UUID
        job_status: Optional status filter (repeatable)
        order: created_at.asc|desc or status.asc|desc
        limit: Page size (default 20, max 100)
        offset: Number of jobs to skip
        status_service: Injected JobStatusService
    """
    return await status_service.list_jobs(
        project_id,
        statuses=job_status,
        order=order,
        limit=limit,
        offset=offset,
    )


@router.get("/active", response_model=list[TranslationJobResponse])
@handle_translation_errors
async def get_active_translation_job(
    project_id: UUID,
    status_service: JobStatusService = Depends(get_job_status_service),
) -> list[TranslationJobResponse]:
    """Return the project's pending or running job as a list of 0 or 1 items."""
    job = await status_service.get_active_job(project_id)
    return [TranslationJobResponse.model_validate(job)] if job else []


@router.get("/{job_id}", response_model=TranslationJobResponse)
@handle_translation_errors
async def get_translation_job(
    job_id: UUID,
    project_id: UUID | None = None,
    status_service: JobStatusService = Depends(get_job_status_service),
) -> TranslationJobResponse:
    """
    Get single job by ID.

    Raises:
        HTTPException(404): Job not found
    """
    job = await status_service.get_job(job_id, project_id=project_id)
    return TranslationJobResponse.model_validate(job)


@router.get("/{job_id}/items", response_model=PaginatedResponse[TranslationJobItemResponse])
@handle_translation_errors
async def list_translation_job_items(
    job_id: UUID,
    item_status: ItemStatus | None = Query(None, alias="status"),
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    status_service: JobStatusService = Depends(get_job_status_service),
) -> PaginatedResponse[TranslationJobItemResponse]:
    """
    List a job's items.

    Args:
        job_id: Job UUID
        item_status: Optional item status filter
        limit: Page size (default 100, max 1000)
        offset: Number of items to skip
        status_service: Injected JobStatusService

    Raises:
        HTTPException(404): Job not found
    """
    return await status_service.list_job_items(
        job_id,
        status=item_status,
        limit=limit,
        offset=offset,
    )


@router.post("/{job_id}/cancel", response_model=TranslationJobResponse)
@handle_translation_errors
async def cancel_translation_job(
    job_id: UUID,
    request: CancelTranslationJobRequest,
    cancellation_service: JobCancellationService = Depends(get_job_cancellation_service),
) -> TranslationJobResponse:
    """
    Cancel a pending or running job.

    Items already processed keep their status; the rest stay pending.

    Raises:
        HTTPException(400): Job is not in a cancellable state
        HTTPException(404): Job not found in the project
    """
    job = await cancellation_service.cancel_job(request.project_id, job_id)
    return TranslationJobResponse.model_validate(job)
