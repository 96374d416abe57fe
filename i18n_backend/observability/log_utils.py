"""
Structured logging helpers.

Flattens job/item context (UUIDs, enums, decimals, key id lists) into
short string fields before it reaches the ``extra`` of a log record.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import enum
import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

MAX_FIELD_LENGTH = 500


def safe_log_value(value: Any, max_length: int = MAX_FIELD_LENGTH) -> str:
    """
    Render a context value as a bounded string.

    Collections are summarized by size so a job over thousands of keys
    does not dump every key id into one record.
    """
    if value is None:
        return "None"
    if isinstance(value, enum.Enum):
        rendered = str(value.value)
    elif isinstance(value, (UUID, Decimal)):
        rendered = str(value)
    elif isinstance(value, (list, tuple, set, frozenset)):
        rendered = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        rendered = f"dict({len(value)} keys)"
    else:
        rendered = str(value)

    if len(rendered) > max_length:
        return f"{rendered[:max_length]}... (truncated, {len(rendered)} total)"
    return rendered


def _context_extra(context: dict[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(value) for key, value in context.items()}


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Fields such as job_id, item_id, status
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra=_context_extra(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """Log an error record carrying exc's traceback plus context fields."""
    extra = _context_extra(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
