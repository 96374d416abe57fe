"""
Observability module.

Provides structured logging helpers, correlation ID tracking and
request logging middleware.
"""

from i18n_backend.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from i18n_backend.observability.logger import configure_logging

__all__ = [
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
