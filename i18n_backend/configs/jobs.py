"""
Translation job configuration settings.

Controls how admitted jobs are dispatched, how many items a job processes
in parallel, persistence timeouts and pagination bounds for status reads.

Dependencies: pydantic, pydantic_settings
System role: Execution loop and status reader configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from i18n_backend.configs.base import BaseSettings


class JobSettings(BaseSettings):
    """Translation job pipeline configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TRANSLATION_JOBS_",
        case_sensitive=False,
        extra="ignore",
    )

    dispatch_mode: Literal["inprocess", "celery"] = Field(
        default="inprocess",
        description="Run jobs as asyncio tasks in the API process or on Celery workers",
    )
    worker_concurrency: int = Field(
        default=1,
        ge=1,
        le=16,
        description="Items of one job processed in parallel (1 = strictly sequential)",
    )
    persistence_timeout_seconds: float = Field(
        default=15.0,
        description="Upper bound for a single ledger/translation transaction",
    )

    default_jobs_limit: int = Field(default=20)
    max_jobs_limit: int = Field(default=100)
    default_items_limit: int = Field(default=100)
    max_items_limit: int = Field(default=1000)

    max_value_length: int = Field(
        default=250,
        description="Maximum translation value length in characters",
    )
    max_error_message_length: int = Field(default=255)
