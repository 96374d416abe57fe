"""
Translation provider configuration settings.

Selects the LLM backend used by translation jobs and bounds every call
with a timeout and a fixed retry budget. Token prices are optional; when
they are unset job costs are reported as NULL.

Dependencies: pydantic, pydantic_settings
System role: LLM provider configuration for the execution loop
"""

from decimal import Decimal
from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from i18n_backend.configs.base import BaseSettings

ProviderName = Literal["google_genai", "bedrock"]


class ProviderSettings(BaseSettings):
    """LLM translation provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TRANSLATION_PROVIDER_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: ProviderName = Field(
        default="google_genai",
        description="Provider backend used when a job does not specify one",
    )
    model: str = Field(
        default="gemini-2.5-flash-lite",
        description="Model used when a job does not specify one",
    )
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=256, ge=1, le=4096)
    api_key: str | None = Field(default=None, description="Google API key (google_genai)")
    region: str = Field(default="us-east-1", description="AWS region (bedrock)")

    timeout_seconds: float = Field(
        default=30.0,
        description="Upper bound for a single provider call",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per item before the item is marked failed",
    )
    retry_initial_seconds: float = Field(default=1.0, description="Initial backoff")
    retry_max_seconds: float = Field(default=10.0, description="Backoff ceiling")
    retry_jitter_seconds: float = Field(default=1.0, description="Random jitter added to backoff")

    input_cost_per_1k_tokens: Decimal | None = Field(
        default=None,
        description="USD per 1000 prompt tokens",
    )
    output_cost_per_1k_tokens: Decimal | None = Field(
        default=None,
        description="USD per 1000 completion tokens",
    )
    estimated_input_tokens_per_key: int = Field(
        default=100,
        description="Prompt tokens assumed per key for cost estimates",
    )
    estimated_output_tokens_per_key: int = Field(
        default=20,
        description="Completion tokens assumed per key for cost estimates",
    )

    @property
    def is_priced(self) -> bool:
        """Whether both token prices are configured."""
        return (
            self.input_cost_per_1k_tokens is not None
            and self.output_cost_per_1k_tokens is not None
        )
