"""
Application services.

Exports:
  - JobAdmissionService, AdmissionResult: Job creation and dispatch
  - JobCancellationService: Cooperative cancellation
  - JobStatusService: Polling reads
  - TranslationService: Translation store write path
"""

from i18n_backend.application.services.job_admission_service import (
    AdmissionResult,
    JobAdmissionService,
    validate_job_request,
)
from i18n_backend.application.services.job_cancellation_service import JobCancellationService
from i18n_backend.application.services.job_status_service import JobStatusService
from i18n_backend.application.services.translation_service import TranslationService

__all__ = [
    "AdmissionResult",
    "JobAdmissionService",
    "JobCancellationService",
    "JobStatusService",
    "TranslationService",
    "validate_job_request",
]
