"""
Translation domain models and schemas.

Request/response schemas for reading and writing translation values.

Dependencies: pydantic, i18n_backend.boundary.db.models
System role: Translation store API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from i18n_backend.boundary.db.models import UpdateSource


class UpdateTranslationRequest(BaseModel):
    """
    Request schema for a single translation write.

    expected_updated_at is the lock token from the caller's last read;
    omit it to write without a concurrency check.
    """

    value: str | None = Field(None, description="New value; empty clears the translation")
    is_machine_translated: bool = False
    updated_source: UpdateSource = UpdateSource.USER
    updated_by_user_id: uuid.UUID | None = None
    expected_updated_at: datetime | None = None


class BulkUpdateTranslationsRequest(BaseModel):
    """Request schema for updating one locale of many keys at once."""

    locale: str = Field(..., min_length=1, max_length=16)
    key_ids: list[uuid.UUID] = Field(..., min_length=1)
    value: str | None = None
    is_machine_translated: bool = False
    updated_source: UpdateSource = UpdateSource.USER
    updated_by_user_id: uuid.UUID | None = None


class BulkUpdateTranslationsResponse(BaseModel):
    """Response schema for a bulk update."""

    updated: int


class TranslationResponse(BaseModel):
    """Response schema for a translation row."""

    model_config = ConfigDict(from_attributes=True)

    project_id: uuid.UUID
    key_id: uuid.UUID
    locale: str
    value: str | None
    is_machine_translated: bool
    updated_source: UpdateSource
    updated_by_user_id: uuid.UUID | None
    updated_at: datetime
