"""
Database models package.

Exports:
  - ProjectModel, ProjectLocaleModel, KeyModel: Project catalog (read-only here)
  - TranslationModel, UpdateSource: Shared translation store
  - TranslationJobModel, JobStatus, TranslationMode: Job ledger
  - TranslationJobItemModel, ItemStatus, ItemErrorCode: Job item tracker

Dependencies: sqlalchemy, i18n_backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from i18n_backend.boundary.db.models.job_item_model import (
    ItemErrorCode,
    ItemStatus,
    TranslationJobItemModel,
)
from i18n_backend.boundary.db.models.project_model import (
    KeyModel,
    ProjectLocaleModel,
    ProjectModel,
)
from i18n_backend.boundary.db.models.translation_job_model import (
    ACTIVE_JOB_STATUSES,
    TERMINAL_JOB_STATUSES,
    JobStatus,
    TranslationJobModel,
    TranslationMode,
)
from i18n_backend.boundary.db.models.translation_model import (
    TranslationModel,
    UpdateSource,
)

__all__ = [
    "ACTIVE_JOB_STATUSES",
    "TERMINAL_JOB_STATUSES",
    "ItemErrorCode",
    "ItemStatus",
    "JobStatus",
    "KeyModel",
    "ProjectLocaleModel",
    "ProjectModel",
    "TranslationJobItemModel",
    "TranslationJobModel",
    "TranslationMode",
    "TranslationModel",
    "UpdateSource",
]
