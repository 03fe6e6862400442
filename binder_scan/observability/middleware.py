"""
FastAPI middleware for observability.

Correlation ID propagation and one access log line per request.

Dependencies: fastapi, binder_scan.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from binder_scan.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, payload size and duration of each request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        label = f"{request.method} {request.url.path}"
        request_size = request.headers.get("content-length", "-")

        try:
            response: Response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(
                f"{label} - unhandled {type(e).__name__} after {elapsed_ms:.0f}ms",
                extra={"path": request.url.path, "process_time_ms": round(elapsed_ms, 2)},
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{label} - {response.status_code} in {elapsed_ms:.0f}ms (request bytes={request_size})",
            extra={
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time_ms": round(elapsed_ms, 2),
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Binds the X-Correlation-ID header (or a new UUID) to the request context."""

    async def dispatch(self, request: Request, call_next):
        """
        Run the request with its correlation ID set and echo it back.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response carrying the X-Correlation-ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
