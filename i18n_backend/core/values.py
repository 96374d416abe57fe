"""
Translation value rules.

Values are trimmed, empty strings become NULL, and stored values must fit
the column (no newlines, bounded length).

Dependencies: i18n_backend.core.exceptions
System role: Shared value normalization for manual and machine writes
"""

from i18n_backend.core.exceptions import ValidationError

DEFAULT_MAX_VALUE_LENGTH = 250


def normalize_value(value: str | None, max_length: int = DEFAULT_MAX_VALUE_LENGTH) -> str | None:
    """
    Normalize a translation value for storage.

    Args:
        value: Raw value
        max_length: Maximum accepted length after trimming

    Returns:
        str | None: Trimmed value, or None for empty input

    Raises:
        ValidationError: If the value contains a newline or is too long
    """
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    if "\n" in trimmed or "\r" in trimmed:
        raise ValidationError("Translation value cannot contain newlines", field="value")
    if len(trimmed) > max_length:
        raise ValidationError(
            f"Translation value cannot exceed {max_length} characters",
            field="value",
        )
    return trimmed


def truncate_error_message(message: str, max_length: int = 255) -> str:
    """Truncate an item error message to the stored length."""
    return message[:max_length]
