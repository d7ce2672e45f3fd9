"""CORS middleware configuration."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kbsearch.middleware.auth import API_KEY_HEADER
from kbsearch.middleware.logging import CORRELATION_HEADER

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", API_KEY_HEADER, CORRELATION_HEADER]
EXPOSED_HEADERS = [CORRELATION_HEADER, "X-Events-Accepted", "Location"]


def configure_cors(app: FastAPI, allowed_origins: list[str]) -> None:
    """Add CORS middleware for the search API.

    Browsers may send the API key and a correlation id, and may read the
    correlation id, accepted-event count and Location headers back.
    Credentials are only allowed for an explicit origin list. A ``*``
    entry opens the API to any origin without credentials.

    Args:
        app: FastAPI application instance.
        allowed_origins: Allowed origin URLs, or ``["*"]``.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials="*" not in allowed_origins,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=EXPOSED_HEADERS,
    )
