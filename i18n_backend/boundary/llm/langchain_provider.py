"""
LangChain-backed translation provider.

Runs the translation prompt through any LangChain chat model (Gemini,
Bedrock, or a fake model in tests), reads token usage from the response
metadata and maps client exceptions onto ProviderError codes.

Dependencies: langchain_core, i18n_backend.boundary.llm.provider
System role: Provider adapter over LangChain chat models
"""

import asyncio
import logging
from decimal import Decimal

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from i18n_backend.boundary.db.models import ItemErrorCode
from i18n_backend.boundary.llm.prompt import get_translation_prompt
from i18n_backend.boundary.llm.provider import (
    ProviderResult,
    TokenUsage,
    clean_translation,
    compute_cost,
)
from i18n_backend.core.exceptions import ProviderError
from i18n_backend.core.values import DEFAULT_MAX_VALUE_LENGTH

logger = logging.getLogger(__name__)

_RATE_LIMIT_MARKERS = ("ratelimit", "rate limit", "resourceexhausted", "throttl", "429")
_CONNECTION_MARKERS = ("connecterror", "connectionerror", "connection reset", "remotedisconnected")


def is_connection_error(exc: BaseException) -> bool:
    """Whether exc is a dropped or refused connection to the provider."""
    if isinstance(exc, ConnectionError):
        return True
    name = type(exc).__name__.lower()
    return any(marker in name or marker in str(exc).lower() for marker in _CONNECTION_MARKERS)


def classify_provider_exception(exc: Exception) -> ProviderError:
    """
    Map a chat model client exception to a ProviderError.

    Rate limits, timeouts and dropped connections are retryable; anything
    else (bad credentials, rejected requests) fails the item at once.
    """
    name = type(exc).__name__.lower()
    text = str(exc).lower()
    if any(marker in name or marker in text for marker in _RATE_LIMIT_MARKERS):
        return ProviderError(
            f"Provider rate limit: {exc}",
            error_code=ItemErrorCode.RATE_LIMIT.value,
            retryable=True,
        )
    if isinstance(exc, TimeoutError) or "timeout" in name:
        return ProviderError(
            f"Provider call timed out: {exc}",
            error_code=ItemErrorCode.PROVIDER_TIMEOUT.value,
            retryable=True,
        )
    return ProviderError(
        f"Provider call failed: {type(exc).__name__}: {exc}",
        error_code=ItemErrorCode.TRANSLATION_ERROR.value,
        retryable=is_connection_error(exc),
    )


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def _message_usage(message: BaseMessage) -> TokenUsage:
    usage = getattr(message, "usage_metadata", None) or {}
    return TokenUsage(
        input_tokens=usage.get("input_tokens", 0),
        output_tokens=usage.get("output_tokens", 0),
    )


class LangChainTranslationProvider:
    """
    Translation provider over a LangChain chat model.

    Usage:
        provider = LangChainTranslationProvider(ChatGoogleGenerativeAI(model="gemini-2.5-flash-lite"))
        result = await provider.translate("Save", "en", "pl")
    """

    def __init__(
        self,
        chat_model: BaseChatModel,
        prompt: ChatPromptTemplate | None = None,
        input_cost_per_1k_tokens: Decimal | None = None,
        output_cost_per_1k_tokens: Decimal | None = None,
        max_length: int = DEFAULT_MAX_VALUE_LENGTH,
    ) -> None:
        """
        Initialize provider.

        Args:
            chat_model: Configured LangChain chat model
            prompt: Prompt template (defaults to the translation prompt)
            input_cost_per_1k_tokens: USD per 1000 prompt tokens
            output_cost_per_1k_tokens: USD per 1000 completion tokens
            max_length: Maximum accepted translation length
        """
        self._chain = (prompt or get_translation_prompt()) | chat_model
        self._input_cost = input_cost_per_1k_tokens
        self._output_cost = output_cost_per_1k_tokens
        self._max_length = max_length

    async def translate(
        self,
        text: str,
        source_locale: str,
        target_locale: str,
    ) -> ProviderResult:
        """
        Translate one string.

        Args:
            text: Source value
            source_locale: Source locale code
            target_locale: Target locale code

        Returns:
            ProviderResult with cleaned text, usage and cost

        Raises:
            ProviderError: On client failure or unusable output
        """
        try:
            message = await self._chain.ainvoke({
                "text": text,
                "source_locale": source_locale,
                "target_locale": target_locale,
            })
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise classify_provider_exception(e) from e

        translated = clean_translation(_message_text(message), self._max_length)
        usage = _message_usage(message)
        logger.debug(
            f"{__name__}:translate - Provider call succeeded",
            extra={
                "source_locale": source_locale,
                "target_locale": target_locale,
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            },
        )
        return ProviderResult(
            translated_text=translated,
            usage=usage,
            cost_usd=compute_cost(usage, self._input_cost, self._output_cost),
        )
