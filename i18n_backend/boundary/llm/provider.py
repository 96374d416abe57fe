"""
Translation provider contract.

The execution loop only depends on TranslationProvider: an async call
that turns one source string into one translated string plus token usage.
Output is cleaned and validated here so every backend produces values the
translation store accepts.

Dependencies: i18n_backend.core
System role: Provider abstraction for the execution loop
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

from i18n_backend.boundary.db.models import ItemErrorCode
from i18n_backend.core.exceptions import ProviderError
from i18n_backend.core.values import DEFAULT_MAX_VALUE_LENGTH

_THOUSAND = Decimal(1000)
COST_QUANTUM = Decimal("0.0001")


@dataclass(frozen=True)
class TokenUsage:
    """Token counts reported by the provider for one call."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class ProviderResult:
    """
    Result of one successful translation call.

    cost_usd is None when token prices are not configured.
    """

    translated_text: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    cost_usd: Decimal | None = None


class TranslationProvider(Protocol):
    """Anything that can translate one string between two locales."""

    async def translate(
        self,
        text: str,
        source_locale: str,
        target_locale: str,
    ) -> ProviderResult:
        """
        Translate text.

        Raises:
            ProviderError: On failure or unusable output
        """
        ...


def clean_translation(raw: str, max_length: int = DEFAULT_MAX_VALUE_LENGTH) -> str:
    """
    Normalize provider output into a storable single-line value.

    Lines are stripped and joined with a single space.

    Args:
        raw: Raw model output
        max_length: Maximum accepted length

    Returns:
        str: Cleaned translation

    Raises:
        ProviderError: INVALID_TRANSLATION when the result is empty or too long
    """
    cleaned = " ".join(line.strip() for line in raw.splitlines() if line.strip())
    if not cleaned:
        raise ProviderError(
            "Provider returned an empty translation",
            error_code=ItemErrorCode.INVALID_TRANSLATION.value,
        )
    if len(cleaned) > max_length:
        raise ProviderError(
            f"Translation exceeds {max_length} characters",
            error_code=ItemErrorCode.INVALID_TRANSLATION.value,
            details={"length": len(cleaned)},
        )
    return cleaned


def compute_cost(
    usage: TokenUsage,
    input_cost_per_1k: Decimal | None,
    output_cost_per_1k: Decimal | None,
) -> Decimal | None:
    """Price a call from its token usage in USD, to 0.0001; None when unpriced."""
    if input_cost_per_1k is None or output_cost_per_1k is None:
        return None
    cost = (
        Decimal(usage.input_tokens) * input_cost_per_1k
        + Decimal(usage.output_tokens) * output_cost_per_1k
    ) / _THOUSAND
    return cost.quantize(COST_QUANTUM)
