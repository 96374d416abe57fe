"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: i18n_backend.configs, i18n_backend.application, i18n_backend.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from i18n_backend.application.services import (
    JobAdmissionService,
    JobCancellationService,
    JobStatusService,
    TranslationService,
)
from i18n_backend.boundary.db import get_async_db, get_async_session_factory
from i18n_backend.configs import Settings, get_settings
from i18n_backend.core.job_execution import TranslationJobExecutor
from i18n_backend.workers.dispatcher import (
    CeleryJobDispatcher,
    InProcessJobDispatcher,
    JobDispatcher,
)


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def _build_executor() -> TranslationJobExecutor:
    return TranslationJobExecutor(get_async_session_factory(), get_settings())


@lru_cache
def get_job_dispatcher() -> JobDispatcher:
    """
    Get the process-wide job dispatcher.

    Returns:
        InProcessJobDispatcher or CeleryJobDispatcher, per
        TRANSLATION_JOBS_DISPATCH_MODE
    """
    settings = get_settings()
    if settings.jobs.dispatch_mode == "celery":
        return CeleryJobDispatcher(queue=settings.celery.task_queue)
    return InProcessJobDispatcher(_build_executor)


def get_job_admission_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
    dispatcher: JobDispatcher = Depends(get_job_dispatcher),
) -> JobAdmissionService:
    """
    Get job admission service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings
        dispatcher: Job dispatcher

    Returns:
        JobAdmissionService: Admission service for this request
    """
    return JobAdmissionService(db=db, settings=settings, dispatcher=dispatcher)


def get_job_status_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> JobStatusService:
    """Get job status service instance."""
    return JobStatusService(db=db, settings=settings.jobs)


def get_job_cancellation_service(
    db: AsyncSession = Depends(get_async_db),
) -> JobCancellationService:
    """Get job cancellation service instance."""
    return JobCancellationService(db=db)


def get_translation_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> TranslationService:
    """Get translation service instance."""
    return TranslationService(db=db, max_value_length=settings.jobs.max_value_length)
