"""Analytics ingestion and reporting endpoints."""

from datetime import date

from fastapi import APIRouter, Query, Request, Response, status

from kbsearch.analytics.recorder import AnalyticsRecorder
from kbsearch.analytics.schemas import EventBatch, EventBatchAccepted, SearchAnalytics
from kbsearch.errors import SearchValidationError

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _parse_day(value: str | None, name: str) -> date:
    """Parse a required YYYY-MM-DD (or full ISO datetime) period bound."""
    if not value:
        raise SearchValidationError(
            "startDate and endDate are required", [f"{name} is required"]
        )
    try:
        return date.fromisoformat(value[:10])
    except ValueError as e:
        raise SearchValidationError(
            "Invalid request parameters",
            [f"{name} must be an ISO-8601 date, got {value!r}"],
        ) from e


@router.post(
    "/events",
    response_model=EventBatchAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Record client events",
    description="Accepts a batch of client events. Unknown event types are skipped.",
)
async def track_events(
    request: Request, response: Response, batch: EventBatch
) -> EventBatchAccepted:
    """Ingest a batch of analytics events.

    Args:
        request: FastAPI request (provides access to app state).
        response: Outgoing response, for the X-Events-Accepted header.
        batch: Events to record.

    Returns:
        Number of events accepted.
    """
    recorder: AnalyticsRecorder = request.app.state.analytics
    accepted = recorder.ingest(batch.events)
    response.headers["X-Events-Accepted"] = str(accepted)
    return EventBatchAccepted(accepted=accepted)


@router.get(
    "/search",
    response_model=SearchAnalytics,
    summary="Search analytics",
    description="Aggregates recorded search and click events over a day range.",
)
async def search_analytics(
    request: Request,
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
) -> SearchAnalytics:
    """Report search metrics for an inclusive period.

    Args:
        request: FastAPI request (provides access to app state).
        start_date: First day of the period.
        end_date: Last day of the period.

    Returns:
        Summary metrics, daily series and top queries.
    """
    start = _parse_day(start_date, "startDate")
    end = _parse_day(end_date, "endDate")
    recorder: AnalyticsRecorder = request.app.state.analytics
    return recorder.search_summary(start, end)
