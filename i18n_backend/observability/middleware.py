"""
FastAPI middleware for observability.

CorrelationMiddleware binds the X-Correlation-ID header (or a fresh UUID)
to the request context; RequestLoggingMiddleware writes one record per
request with status and latency.

Dependencies: fastapi, starlette, i18n_backend.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from i18n_backend.observability.correlation import (
    clear_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
SLOW_REQUEST_MS = 1000.0


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request once it finishes."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        fields = {
            "method": request.method,
            "path": request.url.path,
            "client_host": request.client.host if request.client else None,
        }

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{request.method} {request.url.path} - unhandled {type(e).__name__}",
                extra={**fields, "process_time_ms": _elapsed_ms(started)},
            )
            raise

        elapsed = _elapsed_ms(started)
        level = logging.WARNING if elapsed >= SLOW_REQUEST_MS else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} - {response.status_code}",
            extra={**fields, "status_code": response.status_code, "process_time_ms": elapsed},
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind a correlation ID to the request and echo it in the response."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
