"""
LLM boundary: translation provider contract, LangChain adapter and retries.

Exports:
  - TranslationProvider, ProviderResult, TokenUsage: Provider contract
  - LangChainTranslationProvider: Adapter over LangChain chat models
  - RetryingTranslationProvider: Timeout and bounded retry wrapper
  - get_translation_provider(): Factory for job runs
"""

from i18n_backend.boundary.llm.langchain_provider import LangChainTranslationProvider
from i18n_backend.boundary.llm.provider import (
    ProviderResult,
    TokenUsage,
    TranslationProvider,
    clean_translation,
    compute_cost,
)
from i18n_backend.boundary.llm.provider_factory import (
    get_translation_provider,
    resolve_job_params,
    wrap_with_retries,
)
from i18n_backend.boundary.llm.retrying_provider import RetryingTranslationProvider

__all__ = [
    "LangChainTranslationProvider",
    "ProviderResult",
    "RetryingTranslationProvider",
    "TokenUsage",
    "TranslationProvider",
    "clean_translation",
    "compute_cost",
    "get_translation_provider",
    "resolve_job_params",
    "wrap_with_retries",
]
