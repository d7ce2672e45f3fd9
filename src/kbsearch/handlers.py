"""Exception handlers rendering every failure as a uniform error envelope."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kbsearch.errors import KnowledgeSearchError
from kbsearch.middleware.logging import get_correlation_id

logger = structlog.get_logger()

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def error_body(
    request: Request,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the error envelope.

    Args:
        request: Request being answered, for its correlation id.
        code: Machine-readable error code.
        message: Human-readable description.
        details: Optional structured context; omitted when empty.

    Returns:
        JSON-ready mapping.
    """
    body: dict[str, Any] = {"code": code, "message": message}
    if details:
        body["details"] = details
    body["correlationId"] = get_correlation_id(request)
    return body


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for error in exc.errors():
        # Drop the leading "body"/"query" segment from the location.
        loc = [str(part) for part in error.get("loc", ())][1:]
        errors.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", ""),
            "code": error.get("type", "invalid"),
        })
    return errors


async def knowledge_search_error_handler(
    request: Request, exc: KnowledgeSearchError
) -> JSONResponse:
    """Translate a domain error into its mapped status and envelope."""
    logger.info(
        "request_rejected",
        code=exc.code,
        status=exc.status_code,
        message=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.code, exc.message, exc.details),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request schema violations as 422 with per-field errors."""
    field_errors = _field_errors(exc)
    logger.info("request_validation_failed", field_errors=field_errors)
    return JSONResponse(
        status_code=422,
        content=error_body(
            request,
            "VALIDATION_ERROR",
            "Request validation failed",
            {"fieldErrors": field_errors},
        ),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors, such as unknown routes, as envelopes."""
    code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Resource not found"
    details = {"path": request.url.path} if exc.status_code == 404 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, code, message, details),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected failure and hide its details from the caller."""
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content=error_body(request, "INTERNAL_ERROR", "An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install every handler on the application.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(KnowledgeSearchError, knowledge_search_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
