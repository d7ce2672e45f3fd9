"""Health check endpoints for liveness and readiness probes."""
from typing import Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    """Response model for liveness probe.

    Attributes:
        status: Always 'alive' when process is running.
    """

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Individual dependency check result.

    Attributes:
        name: Identifier for the dependency being checked.
        status: Result of the check ('ok' or 'failed').
        message: Error details when status is 'failed'.
    """

    name: str
    status: Literal["ok", "failed"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Response model for readiness probe.

    Attributes:
        status: Overall readiness ('ready' or 'not_ready').
        checks: List of individual dependency check results.
    """

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]


def _check_component(request: Request, name: str) -> ReadinessCheck:
    """Verify a component was attached to app state during startup.

    Args:
        request: Incoming request, for access to app state.
        name: Attribute name on app.state.

    Returns:
        Check result with status and optional error message.
    """
    if getattr(request.app.state, name, None) is None:
        return ReadinessCheck(name=name, status="failed", message="Not initialized")
    return ReadinessCheck(name=name, status="ok")


def _check_corpus(request: Request) -> ReadinessCheck:
    store = getattr(request.app.state, "store", None)
    if store is None:
        return ReadinessCheck(name="corpus", status="failed", message="Corpus not loaded")
    return ReadinessCheck(name="corpus", status="ok", message=f"{len(store)} articles")


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe endpoint.

    Returns immediate success if the process is running.

    Returns:
        Liveness status response.
    """
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Ready once the corpus is seeded and the search engine and analytics
    recorder are attached. Returns 200 if all checks pass, 503 otherwise.

    Returns:
        Readiness status with individual check results.
    """
    checks = [
        _check_corpus(request),
        _check_component(request, "engine"),
        _check_component(request, "analytics"),
    ]
    all_ok = all(c.status == "ok" for c in checks)
    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        checks=checks,
    )
    code = status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=code)
