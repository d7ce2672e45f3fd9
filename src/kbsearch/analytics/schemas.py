"""Pydantic schemas for analytics ingestion and reporting."""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import Field

from kbsearch.corpus.schemas import CamelModel


class EventType(str, Enum):
    """Client event types the recorder accepts."""

    SEARCH = "search"
    SEARCH_RESULT_CLICK = "search_result_click"
    ARTICLE_VIEW = "article_view"
    ARTICLE_HELPFUL = "article_helpful"
    ARTICLE_COPY = "article_copy"
    SESSION_START = "session_start"
    SESSION_END = "session_end"


class AnalyticsEvent(CamelModel):
    """One client event as received.

    The event type is kept as a raw string so unknown types can be
    skipped by the recorder instead of failing the whole batch.

    Attributes:
        event_type: One of the EventType values.
        session_id: Client session the event belongs to.
        timestamp: When the event happened; defaults to receipt time.
        data: Free-form payload (query, resultCount, searchId, articleId).
    """

    event_type: str | None = None
    session_id: str | None = None
    timestamp: datetime | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class RecordedEvent(CamelModel):
    """An accepted event, stamped on receipt."""

    event_type: EventType
    session_id: str | None = None
    timestamp: datetime
    received_at: datetime
    data: dict[str, Any] = Field(default_factory=dict)


class EventBatch(CamelModel):
    """Request body for batched event ingestion."""

    events: list[AnalyticsEvent] = Field(default_factory=list)


class EventBatchAccepted(CamelModel):
    """Ingestion response."""

    accepted: int


class AnalyticsPeriod(CamelModel):
    """Inclusive reporting period."""

    start: date
    end: date
    granularity: str = "day"


class SearchMetrics(CamelModel):
    """Scalar search metrics over a period."""

    total_searches: int
    total_clicks: int
    unique_sessions: int
    avg_results_per_search: float
    zero_result_rate: float
    click_through_rate: float


class DailySearches(CamelModel):
    """Search and click counts for a single date."""

    date: str = Field(description="ISO date, YYYY-MM-DD")
    searches: int = 0
    clicks: int = 0


class QueryStat(CamelModel):
    """A query with its volume and click-through rate."""

    query: str
    count: int
    ctr: float


class SearchAnalytics(CamelModel):
    """Complete search analytics response."""

    period: AnalyticsPeriod
    summary: SearchMetrics
    time_series: list[DailySearches]
    top_queries: list[QueryStat]
