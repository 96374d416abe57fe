"""
Translation provider factory.

Builds the LangChain chat model for a job from its params (falling back
to provider settings) and wraps it in the retry/timeout policy.

Dependencies: langchain_google_genai, langchain_aws, i18n_backend.configs
System role: Provider instantiation and selection
"""

import logging

from langchain_aws import ChatBedrockConverse
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from i18n_backend.boundary.llm.langchain_provider import LangChainTranslationProvider
from i18n_backend.boundary.llm.provider import TranslationProvider
from i18n_backend.boundary.llm.retrying_provider import RetryingTranslationProvider
from i18n_backend.configs.provider import ProviderSettings
from i18n_backend.models.translation_job import (
    BedrockJobParams,
    GoogleGenAIJobParams,
    TranslationJobParams,
)

logger = logging.getLogger(__name__)


def resolve_job_params(
    provider_settings: ProviderSettings,
    params: TranslationJobParams | None = None,
) -> TranslationJobParams:
    """
    Fill unset job params from provider settings.

    Args:
        provider_settings: Provider defaults
        params: Params supplied with the job, if any

    Returns:
        Params with provider, model, temperature and max_tokens set
    """
    if params is None:
        if provider_settings.provider == "bedrock":
            params = BedrockJobParams()
        else:
            params = GoogleGenAIJobParams()

    update = {
        "model": params.model or provider_settings.model,
        "temperature": (
            params.temperature if params.temperature is not None else provider_settings.temperature
        ),
        "max_tokens": params.max_tokens or provider_settings.max_tokens,
    }
    if isinstance(params, BedrockJobParams):
        update["region"] = params.region or provider_settings.region
    return params.model_copy(update=update)


def build_chat_model(
    provider_settings: ProviderSettings,
    params: TranslationJobParams,
) -> BaseChatModel:
    """
    Create the chat model selected by params.provider.

    Raises:
        ValueError: If the provider is not supported
    """
    if isinstance(params, GoogleGenAIJobParams):
        kwargs = {}
        if provider_settings.api_key:
            kwargs["google_api_key"] = provider_settings.api_key
        return ChatGoogleGenerativeAI(
            model=params.model,
            temperature=params.temperature,
            max_output_tokens=params.max_tokens,
            **kwargs,
        )

    if isinstance(params, BedrockJobParams):
        return ChatBedrockConverse(
            model=params.model,
            region_name=params.region,
            temperature=params.temperature,
            max_tokens=params.max_tokens,
        )

    raise ValueError(f"Unsupported translation provider: {params.provider}")


def get_translation_provider(
    provider_settings: ProviderSettings,
    params: TranslationJobParams | None = None,
    max_length: int = 250,
) -> TranslationProvider:
    """
    Factory function for the provider used by one job run.

    Args:
        provider_settings: Provider settings
        params: Job params (resolved against settings when partial)
        max_length: Maximum accepted translation length

    Returns:
        TranslationProvider with timeout and retries applied
    """
    resolved = resolve_job_params(provider_settings, params)
    logger.info(
        f"{__name__}:get_translation_provider - Creating {resolved.provider} provider",
        extra={"provider": resolved.provider, "model": resolved.model},
    )
    provider = LangChainTranslationProvider(
        build_chat_model(provider_settings, resolved),
        input_cost_per_1k_tokens=provider_settings.input_cost_per_1k_tokens,
        output_cost_per_1k_tokens=provider_settings.output_cost_per_1k_tokens,
        max_length=max_length,
    )
    return wrap_with_retries(provider, provider_settings)


def wrap_with_retries(
    provider: TranslationProvider,
    provider_settings: ProviderSettings,
) -> RetryingTranslationProvider:
    """Apply the configured timeout and retry policy to a provider."""
    return RetryingTranslationProvider(
        provider,
        max_attempts=provider_settings.max_attempts,
        timeout_seconds=provider_settings.timeout_seconds,
        initial_wait_seconds=provider_settings.retry_initial_seconds,
        max_wait_seconds=provider_settings.retry_max_seconds,
        jitter_seconds=provider_settings.retry_jitter_seconds,
    )
