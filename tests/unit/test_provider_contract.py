"""
Test suite for provider output cleaning, cost computation and the
LangChain-backed provider.

Uses langchain_core fake chat models instead of a real LLM.

System role: Verification of the provider boundary
"""

from decimal import Decimal

import pytest
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from i18n_backend.boundary.db.models import ItemErrorCode
from i18n_backend.boundary.llm import (
    LangChainTranslationProvider,
    TokenUsage,
    clean_translation,
    compute_cost,
)
from i18n_backend.boundary.llm.langchain_provider import classify_provider_exception
from i18n_backend.boundary.llm.prompt import get_translation_prompt
from i18n_backend.core.exceptions import ProviderError


def _reset_connection(_):
    raise ConnectionError("connection reset by peer")


class TestCleanTranslation:
    """Test suite for clean_translation()."""

    def test_joins_lines_with_single_space(self) -> None:
        """Test multi-line output is flattened."""
        assert clean_translation("  Zapisz\n\n  zmiany  \n") == "Zapisz zmiany"

    def test_empty_output_is_invalid(self) -> None:
        """Test whitespace-only output raises INVALID_TRANSLATION."""
        with pytest.raises(ProviderError) as exc_info:
            clean_translation(" \n ")
        assert exc_info.value.error_code == ItemErrorCode.INVALID_TRANSLATION.value
        assert exc_info.value.retryable is False

    def test_too_long_output_is_invalid(self) -> None:
        """Test output over max_length raises INVALID_TRANSLATION."""
        with pytest.raises(ProviderError) as exc_info:
            clean_translation("x" * 11, max_length=10)
        assert exc_info.value.error_code == ItemErrorCode.INVALID_TRANSLATION.value


class TestComputeCost:
    """Test suite for compute_cost()."""

    def test_prices_input_and_output_tokens(self) -> None:
        """Test cost = in/1000 * in_price + out/1000 * out_price."""
        usage = TokenUsage(input_tokens=1000, output_tokens=500)
        cost = compute_cost(usage, Decimal("0.10"), Decimal("0.40"))
        assert cost == Decimal("0.3")

    def test_cost_is_quantized_per_call(self) -> None:
        """Test fractions below 0.0001 USD are rounded away."""
        cost = compute_cost(TokenUsage(input_tokens=1, output_tokens=0), Decimal("1.37"), Decimal("0"))
        assert cost == Decimal("0.0014")
        assert cost.as_tuple().exponent == -4

    @pytest.mark.parametrize(
        ("input_price", "output_price"),
        [(None, Decimal("0.4")), (Decimal("0.1"), None), (None, None)],
    )
    def test_unpriced_returns_none(self, input_price, output_price) -> None:
        """Test cost is unknown unless both prices are set."""
        assert compute_cost(TokenUsage(10, 10), input_price, output_price) is None


class TestClassifyProviderException:
    """Test suite for classify_provider_exception()."""

    def test_rate_limit(self) -> None:
        class ResourceExhausted(Exception):
            pass

        error = classify_provider_exception(ResourceExhausted("quota"))
        assert error.error_code == ItemErrorCode.RATE_LIMIT.value
        assert error.retryable

    def test_timeout(self) -> None:
        error = classify_provider_exception(TimeoutError("slow"))
        assert error.error_code == ItemErrorCode.PROVIDER_TIMEOUT.value
        assert error.retryable

    def test_connection_errors_are_retryable(self) -> None:
        error = classify_provider_exception(ConnectionError("reset by peer"))
        assert error.error_code == ItemErrorCode.TRANSLATION_ERROR.value
        assert error.retryable

    def test_client_named_connect_errors_are_retryable(self) -> None:
        class ConnectError(Exception):
            pass

        assert classify_provider_exception(ConnectError("dns failure")).retryable

    @pytest.mark.parametrize(
        "error",
        [
            PermissionError("API key not valid"),
            ValueError("400 Invalid argument: model not found"),
            RuntimeError("unexpected response"),
        ],
    )
    def test_other_errors_are_not_retryable(self, error) -> None:
        """Test credential and request errors fail the item without retries."""
        classified = classify_provider_exception(error)
        assert classified.error_code == ItemErrorCode.TRANSLATION_ERROR.value
        assert classified.retryable is False


def test_prompt_mentions_locales_and_text() -> None:
    """Test the prompt renders source/target locale and the text."""
    messages = get_translation_prompt().format_messages(
        source_locale="en",
        target_locale="pl",
        text="Save changes",
    )
    rendered = " ".join(str(message.content) for message in messages)
    assert "en" in rendered
    assert "pl" in rendered
    assert "Save changes" in rendered


class TestLangChainTranslationProvider:
    """Test suite for LangChainTranslationProvider."""

    async def test_translate_returns_cleaned_text_usage_and_cost(self) -> None:
        """Test a chat model reply becomes a ProviderResult."""
        # Arrange
        reply = AIMessage(
            content="  Zapisz zmiany\n",
            usage_metadata={"input_tokens": 200, "output_tokens": 50, "total_tokens": 250},
        )
        provider = LangChainTranslationProvider(
            GenericFakeChatModel(messages=iter([reply])),
            input_cost_per_1k_tokens=Decimal("0.10"),
            output_cost_per_1k_tokens=Decimal("0.40"),
        )

        # Act
        result = await provider.translate("Save changes", "en", "pl")

        # Assert
        assert result.translated_text == "Zapisz zmiany"
        assert result.usage == TokenUsage(input_tokens=200, output_tokens=50)
        assert result.cost_usd == Decimal("0.04")

    async def test_translate_without_prices_has_no_cost(self) -> None:
        provider = LangChainTranslationProvider(
            GenericFakeChatModel(messages=iter([AIMessage(content="Anuluj")]))
        )

        result = await provider.translate("Cancel", "en", "pl")

        assert result.translated_text == "Anuluj"
        assert result.cost_usd is None

    async def test_empty_reply_is_invalid_translation(self) -> None:
        """Test an empty completion fails with INVALID_TRANSLATION."""
        provider = LangChainTranslationProvider(
            GenericFakeChatModel(messages=iter([AIMessage(content="   ")]))
        )

        with pytest.raises(ProviderError) as exc_info:
            await provider.translate("Cancel", "en", "pl")

        assert exc_info.value.error_code == ItemErrorCode.INVALID_TRANSLATION.value

    async def test_client_failure_is_classified(self) -> None:
        """Test exceptions from the chat model become retryable ProviderErrors."""
        provider = LangChainTranslationProvider(RunnableLambda(_reset_connection))

        with pytest.raises(ProviderError) as exc_info:
            await provider.translate("Cancel", "en", "pl")

        assert exc_info.value.retryable
