"""API key authentication middleware."""

import secrets
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from kbsearch.middleware.logging import get_correlation_id

API_KEY_HEADER = "X-API-Key"

PUBLIC_PATHS = frozenset(
    {
        "/api/v1/health/live",
        "/api/v1/health/ready",
    }
)


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Middleware that validates the API key on every non-health route.

    Only installed when a key is configured.
    """

    def __init__(self, app: Callable[..., Awaitable[Response]], api_key: str) -> None:
        """Initialize middleware with API key.

        Args:
            app: ASGI application.
            api_key: Expected API key value.
        """
        super().__init__(app)  # type: ignore[arg-type]
        self._api_key = api_key

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Validate API key for non-public endpoints.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response, or 401 if authentication fails.
        """
        if request.url.path in PUBLIC_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        provided_key = request.headers.get(API_KEY_HEADER, "")

        if not provided_key:
            return self._unauthorized(request, f"Missing {API_KEY_HEADER} header")

        if not secrets.compare_digest(provided_key, self._api_key):
            return self._unauthorized(request, "Invalid API key")

        return await call_next(request)

    @staticmethod
    def _unauthorized(request: Request, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={
                "code": "UNAUTHORIZED",
                "message": message,
                "correlationId": get_correlation_id(request),
            },
        )
