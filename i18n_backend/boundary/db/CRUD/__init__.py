"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from i18n_backend.boundary.db.CRUD import translation_job_crud, job_item_crud

    job = await translation_job_crud.get_by_id(db, job_id)
    items = await job_item_crud.list_for_job(db, job_id, limit=100)
"""

from i18n_backend.boundary.db.CRUD.base_crud import BaseCRUD
from i18n_backend.boundary.db.CRUD.job_item_crud import JobItemCRUD, job_item_crud
from i18n_backend.boundary.db.CRUD.project_crud import (
    KeyCRUD,
    ProjectCRUD,
    key_crud,
    project_crud,
)
from i18n_backend.boundary.db.CRUD.translation_crud import (
    TranslationCRUD,
    translation_crud,
)
from i18n_backend.boundary.db.CRUD.translation_job_crud import (
    JobOrder,
    TranslationJobCRUD,
    translation_job_crud,
)

__all__ = [
    "BaseCRUD",
    "JobItemCRUD",
    "JobOrder",
    "KeyCRUD",
    "ProjectCRUD",
    "TranslationCRUD",
    "TranslationJobCRUD",
    "job_item_crud",
    "key_crud",
    "project_crud",
    "translation_crud",
    "translation_job_crud",
]
