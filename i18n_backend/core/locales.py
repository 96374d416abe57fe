"""
Locale code rules.

Locale codes are two-letter language codes with an optional two-letter
region, normalized to ``ll`` or ``ll-CC`` (``EN-gb`` becomes ``en-GB``).

Dependencies: re (stdlib)
System role: Locale normalization and validation
"""

import re

LOCALE_PATTERN = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")
_LOOSE_LOCALE = re.compile(r"^([a-zA-Z]{2})(?:-([a-zA-Z]{2}))?$")


def normalize_locale(locale: str) -> str:
    """
    Normalize a locale code to ll or ll-CC.

    Values that do not look like a locale are returned stripped but
    otherwise unchanged so validation can reject them.

    Args:
        locale: Raw locale code

    Returns:
        str: Normalized locale code
    """
    candidate = locale.strip()
    match = _LOOSE_LOCALE.match(candidate)
    if not match:
        return candidate
    language, region = match.groups()
    if region:
        return f"{language.lower()}-{region.upper()}"
    return language.lower()


def is_valid_locale(locale: str) -> bool:
    """Return True when locale is already in normalized BCP-47 form."""
    return bool(LOCALE_PATTERN.match(locale))
