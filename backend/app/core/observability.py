"""
Request logging middleware.

Tags every request with a correlation ID (taken from the caller's
``X-Correlation-ID`` header or freshly generated), exposes it to handlers
as ``request.state.correlation_id``, and writes one log line per request
at a level matching the response status.
"""

import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from backend.app.core.logging_config import get_logger

logger = get_logger("http")

CORRELATION_HEADER = "X-Correlation-ID"
PROCESS_TIME_HEADER = "X-Process-Time"


def _log_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - started) * 1000
        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers[PROCESS_TIME_HEADER] = f"{duration_ms:.2f}"

        logger.log(
            _log_level(response.status_code),
            "%s %s -> %d (%.2f ms)",
            request.method, request.url.path, response.status_code, duration_ms,
            extra={
                "correlation_id": correlation_id,
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
