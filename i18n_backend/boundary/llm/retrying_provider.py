"""
Bounded retry and timeout wrapper for translation providers.

Every attempt is bounded by asyncio.wait_for; retryable ProviderErrors are
retried with exponential backoff and jitter up to a fixed attempt count.
The last error is re-raised when attempts are exhausted.

Dependencies: tenacity, i18n_backend.boundary.llm.provider
System role: Per-item retry policy for the execution loop
"""

import asyncio
import logging

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from i18n_backend.boundary.db.models import ItemErrorCode
from i18n_backend.boundary.llm.langchain_provider import classify_provider_exception
from i18n_backend.boundary.llm.provider import ProviderResult, TranslationProvider
from i18n_backend.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ProviderError) and exc.retryable


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        f"{__name__}:translate - Retry {retry_state.attempt_number} after provider error",
        extra={
            "attempt": retry_state.attempt_number,
            "error_code": getattr(exc, "error_code", None),
            "error_msg": str(exc),
        },
    )


class RetryingTranslationProvider:
    """Wraps a TranslationProvider with a timeout and bounded retries."""

    def __init__(
        self,
        provider: TranslationProvider,
        max_attempts: int = 3,
        timeout_seconds: float = 30.0,
        initial_wait_seconds: float = 1.0,
        max_wait_seconds: float = 10.0,
        jitter_seconds: float = 1.0,
    ) -> None:
        """
        Initialize retry wrapper.

        Args:
            provider: Provider to wrap
            max_attempts: Total attempts per call (1 disables retries)
            timeout_seconds: Upper bound for each attempt
            initial_wait_seconds: First backoff interval
            max_wait_seconds: Backoff ceiling
            jitter_seconds: Maximum random jitter added to each wait
        """
        self.provider = provider
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self._wait = wait_exponential_jitter(
            initial=initial_wait_seconds,
            max=max_wait_seconds,
            jitter=jitter_seconds,
        )

    async def _attempt(self, text: str, source_locale: str, target_locale: str) -> ProviderResult:
        try:
            return await asyncio.wait_for(
                self.provider.translate(text, source_locale, target_locale),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"Provider call timed out after {self.timeout_seconds}s",
                error_code=ItemErrorCode.PROVIDER_TIMEOUT.value,
                retryable=True,
            ) from e
        except ProviderError:
            raise
        except Exception as e:
            raise classify_provider_exception(e) from e

    async def translate(
        self,
        text: str,
        source_locale: str,
        target_locale: str,
    ) -> ProviderResult:
        """
        Translate with timeout and retries.

        Raises:
            ProviderError: Last error once attempts are exhausted, or the
                first non-retryable error
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=retry_if_exception(_is_retryable),
            before_sleep=_log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._attempt(text, source_locale, target_locale)
        raise AssertionError("unreachable")
