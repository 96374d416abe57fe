"""
Translation API endpoints.

Routes:
- GET /translations/{project_id}/{key_id}/{locale} - Get one translation
- PATCH /translations/{project_id}/{key_id}/{locale} - Write one translation
  (optimistic lock when expected_updated_at is given)
- PATCH /translations/{project_id}/bulk - Write one locale of many keys

Dependencies: i18n_backend.application.services, i18n_backend.models
System role: Translation store HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from i18n_backend.api.deps.dependencies import get_translation_service
from i18n_backend.api.routers.router_utils import handle_translation_errors
from i18n_backend.application.services import TranslationService
from i18n_backend.models.translation import (
    BulkUpdateTranslationsRequest,
    BulkUpdateTranslationsResponse,
    TranslationResponse,
    UpdateTranslationRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translations", tags=["translations"])


@router.patch("/{project_id}/bulk", response_model=BulkUpdateTranslationsResponse)
@handle_translation_errors
async def bulk_update_translations(
    project_id: UUID,
    request: BulkUpdateTranslationsRequest,
    translation_service: TranslationService = Depends(get_translation_service),
) -> BulkUpdateTranslationsResponse:
    """
    Write the same value for many keys of one locale.

    No per-row lock check: concurrent edits to these rows are overwritten.
    """
    updated = await translation_service.bulk_update_translations(
        project_id,
        request.locale,
        request.key_ids,
        request.value,
        is_machine_translated=request.is_machine_translated,
        updated_source=request.updated_source,
        updated_by_user_id=request.updated_by_user_id,
    )
    return BulkUpdateTranslationsResponse(updated=updated)


@router.get("/{project_id}/{key_id}/{locale}", response_model=TranslationResponse)
@handle_translation_errors
async def get_translation(
    project_id: UUID,
    key_id: UUID,
    locale: str,
    translation_service: TranslationService = Depends(get_translation_service),
) -> TranslationResponse:
    """Get one translation row."""
    translation = await translation_service.get_translation(project_id, key_id, locale)
    return TranslationResponse.model_validate(translation)


@router.patch("/{project_id}/{key_id}/{locale}", response_model=TranslationResponse)
@handle_translation_errors
async def update_translation(
    project_id: UUID,
    key_id: UUID,
    locale: str,
    request: UpdateTranslationRequest,
    translation_service: TranslationService = Depends(get_translation_service),
) -> TranslationResponse:
    """
    Write one translation value.

    Raises:
        HTTPException(400): Invalid value
        HTTPException(404): Project or translation not found
        HTTPException(409): Row changed since expected_updated_at
    """
    translation = await translation_service.update_translation(
        project_id,
        key_id,
        locale,
        request.value,
        is_machine_translated=request.is_machine_translated,
        updated_source=request.updated_source,
        updated_by_user_id=request.updated_by_user_id,
        expected_updated_at=request.expected_updated_at,
    )
    return TranslationResponse.model_validate(translation)
