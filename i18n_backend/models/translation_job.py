"""
Translation job domain models and schemas.

Request/response schemas for job admission, status polling and
cancellation, plus the provider parameter payload stored on each job.

Params are a discriminated union keyed by ``provider`` so the execution
loop can build the right chat model without probing an untyped dict.

Dependencies: pydantic, i18n_backend.boundary.db.models
System role: Translation job API contracts
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from i18n_backend.boundary.db.models import ItemStatus, JobStatus, TranslationMode
from i18n_backend.core.locales import normalize_locale


class _JobParamsBase(BaseModel):
    """Parameters shared by every provider."""

    model: str | None = Field(None, min_length=1, max_length=128, description="Model override")
    temperature: float | None = Field(None, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int | None = Field(None, ge=1, le=4096, description="Completion token limit")


class GoogleGenAIJobParams(_JobParamsBase):
    """Google Generative AI (Gemini) parameters."""

    provider: Literal["google_genai"] = "google_genai"


class BedrockJobParams(_JobParamsBase):
    """AWS Bedrock Converse parameters."""

    provider: Literal["bedrock"] = "bedrock"
    region: str | None = Field(None, description="AWS region override")


TranslationJobParams = Annotated[
    Union[GoogleGenAIJobParams, BedrockJobParams],
    Field(discriminator="provider"),
]


class CreateTranslationJobRequest(BaseModel):
    """
    Request schema for creating a translation job.

    Structural validation only; the mode/key rules and locale format are
    checked by the admission service so every caller gets the same errors.
    """

    project_id: uuid.UUID
    mode: TranslationMode
    target_locale: str = Field(..., min_length=1, max_length=16)
    key_ids: list[uuid.UUID] | None = Field(
        None,
        description="Required for 'selected' (1+) and 'single' (exactly 1); forbidden for 'all'",
    )
    params: TranslationJobParams | None = None

    @field_validator("target_locale")
    @classmethod
    def _normalize_target_locale(cls, value: str) -> str:
        return normalize_locale(value)


class CreateTranslationJobResponse(BaseModel):
    """Response schema for an admitted job."""

    job_id: uuid.UUID
    message: str = "Translation job created"
    status: JobStatus


class CancelTranslationJobRequest(BaseModel):
    """Request schema for cancelling a job."""

    project_id: uuid.UUID


class TranslationJobResponse(BaseModel):
    """Response schema for a translation job."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    mode: TranslationMode
    source_locale: str
    target_locale: str
    status: JobStatus
    provider: str | None
    model: str | None
    params: dict | None
    total_keys: int
    completed_keys: int
    failed_keys: int
    estimated_cost_usd: Decimal | None
    actual_cost_usd: Decimal | None
    started_at: datetime | None
    finished_at: datetime | None
    created_at: datetime
    updated_at: datetime


class TranslationJobItemResponse(BaseModel):
    """Response schema for a job item."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    job_id: uuid.UUID
    key_id: uuid.UUID
    status: ItemStatus
    error_code: str | None
    error_message: str | None
    created_at: datetime
    updated_at: datetime
