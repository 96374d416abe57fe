"""
Test suite for RetryingTranslationProvider.

Waits are configured to zero so retries run instantly.

System role: Verification of provider timeouts and bounded retries
"""

import asyncio

import pytest

from i18n_backend.boundary.db.models import ItemErrorCode
from i18n_backend.boundary.llm import ProviderResult, RetryingTranslationProvider
from i18n_backend.core.exceptions import ProviderError


class ScriptedProvider:
    """Raises the scripted errors in order, then succeeds."""

    def __init__(self, errors: list[Exception] | None = None, delay: float = 0.0) -> None:
        self.errors = list(errors or [])
        self.delay = delay
        self.attempts = 0

    async def translate(self, text: str, source_locale: str, target_locale: str) -> ProviderResult:
        self.attempts += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.errors:
            raise self.errors.pop(0)
        return ProviderResult(translated_text=f"{text}-{target_locale}")


def _retrying(provider, max_attempts: int = 3, timeout_seconds: float = 5.0):
    return RetryingTranslationProvider(
        provider,
        max_attempts=max_attempts,
        timeout_seconds=timeout_seconds,
        initial_wait_seconds=0,
        max_wait_seconds=0,
        jitter_seconds=0,
    )


def _rate_limited() -> ProviderError:
    return ProviderError("429", error_code=ItemErrorCode.RATE_LIMIT.value, retryable=True)


class TestRetryingTranslationProvider:
    """Test suite for retry behaviour."""

    async def test_success_on_first_attempt(self) -> None:
        inner = ScriptedProvider()

        result = await _retrying(inner).translate("Save", "en", "pl")

        assert result.translated_text == "Save-pl"
        assert inner.attempts == 1

    async def test_retryable_errors_are_retried_until_success(self) -> None:
        """Test two rate limits followed by success uses three attempts."""
        inner = ScriptedProvider(errors=[_rate_limited(), _rate_limited()])

        result = await _retrying(inner).translate("Save", "en", "pl")

        assert result.translated_text == "Save-pl"
        assert inner.attempts == 3

    async def test_gives_up_after_max_attempts(self) -> None:
        """Test the last error surfaces once attempts are exhausted."""
        inner = ScriptedProvider(errors=[_rate_limited() for _ in range(5)])

        with pytest.raises(ProviderError) as exc_info:
            await _retrying(inner, max_attempts=3).translate("Save", "en", "pl")

        assert exc_info.value.error_code == ItemErrorCode.RATE_LIMIT.value
        assert inner.attempts == 3

    async def test_non_retryable_error_fails_immediately(self) -> None:
        """Test INVALID_TRANSLATION is not retried."""
        invalid = ProviderError("empty", error_code=ItemErrorCode.INVALID_TRANSLATION.value)
        inner = ScriptedProvider(errors=[invalid])

        with pytest.raises(ProviderError) as exc_info:
            await _retrying(inner).translate("Save", "en", "pl")

        assert exc_info.value is invalid
        assert inner.attempts == 1

    async def test_timeout_becomes_provider_timeout(self) -> None:
        """Test an attempt exceeding the timeout is recorded as PROVIDER_TIMEOUT."""
        inner = ScriptedProvider(delay=0.5)

        with pytest.raises(ProviderError) as exc_info:
            await _retrying(inner, max_attempts=2, timeout_seconds=0.01).translate(
                "Save", "en", "pl"
            )

        assert exc_info.value.error_code == ItemErrorCode.PROVIDER_TIMEOUT.value
        assert inner.attempts == 2

    async def test_connection_reset_is_retried(self) -> None:
        """Test a dropped connection is wrapped and retried."""
        inner = ScriptedProvider(errors=[ConnectionResetError("reset by peer")])

        result = await _retrying(inner).translate("Save", "en", "pl")

        assert result.translated_text == "Save-pl"
        assert inner.attempts == 2

    async def test_unexpected_exception_is_wrapped_and_not_retried(self) -> None:
        """Test other client exceptions fail after a single attempt."""
        inner = ScriptedProvider(errors=[PermissionError("API key not valid")])

        with pytest.raises(ProviderError) as exc_info:
            await _retrying(inner).translate("Save", "en", "pl")

        assert exc_info.value.error_code == ItemErrorCode.TRANSLATION_ERROR.value
        assert exc_info.value.retryable is False
        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert inner.attempts == 1
