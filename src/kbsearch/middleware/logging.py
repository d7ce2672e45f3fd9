"""Request logging and correlation id middleware."""
import time
import uuid
from collections.abc import Callable
from typing import Awaitable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

CORRELATION_HEADER = "X-Correlation-ID"

EXCLUDED_PATHS = frozenset({
    "/api/v1/health/live",
    "/api/v1/health/ready",
})


def get_correlation_id(request: Request) -> str:
    """Correlation id assigned to this request, or a fresh one."""
    existing = getattr(request.state, "correlation_id", None)
    if existing:
        return existing
    return request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that tags each request with a correlation id and logs it.

    The id is taken from the X-Correlation-ID header when the caller sends
    one, bound into structlog contextvars for the life of the request, and
    echoed on the response. Health probes are not logged.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response from handler.
        """
        correlation_id = get_correlation_id(request)
        request.state.correlation_id = correlation_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        if request.url.path in EXCLUDED_PATHS:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
            client=request.client.host if request.client else None,
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
