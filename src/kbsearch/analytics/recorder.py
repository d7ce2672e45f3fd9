"""In-memory analytics event recorder and search aggregates."""

import threading
from collections import Counter, defaultdict, deque
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta, timezone

import structlog

from kbsearch.analytics.schemas import (
    AnalyticsEvent,
    AnalyticsPeriod,
    DailySearches,
    EventType,
    QueryStat,
    RecordedEvent,
    SearchAnalytics,
    SearchMetrics,
)
from kbsearch.corpus.schemas import as_utc
from kbsearch.errors import SearchValidationError

logger = structlog.get_logger()

DEFAULT_MAX_BATCH = 10
DEFAULT_MAX_DAYS = 366
DEFAULT_MAX_EVENTS = 10_000
TOP_QUERY_LIMIT = 10

_VALID_TYPES = {t.value for t in EventType}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ratio(numerator: int, denominator: int) -> float:
    return round(numerator / denominator, 4) if denominator else 0.0


def _query_of(event: RecordedEvent) -> str | None:
    query = event.data.get("query")
    if not isinstance(query, str):
        return None
    return query.strip().lower() or None


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _event_time(index: int, event: AnalyticsEvent, received_at: datetime) -> datetime:
    if event.timestamp is None:
        return received_at
    try:
        return as_utc(event.timestamp)
    except OverflowError as e:
        raise SearchValidationError(
            "Invalid request parameters",
            [f"events[{index}].timestamp is outside the supported date range"],
        ) from e


class AnalyticsRecorder:
    """Thread-safe store of client events with search reporting.

    Events are kept in arrival order. Once max_events are held, each new
    event evicts the oldest one.
    """

    def __init__(
        self,
        max_batch: int = DEFAULT_MAX_BATCH,
        max_days: int = DEFAULT_MAX_DAYS,
        max_events: int = DEFAULT_MAX_EVENTS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize recorder.

        Args:
            max_batch: Largest batch accepted by ingest.
            max_days: Longest period, in days, a summary may cover.
            max_events: Number of most recent events retained.
            clock: Source of receipt timestamps.
        """
        self._max_batch = max_batch
        self._max_days = max_days
        self._clock = clock
        self._events: deque[RecordedEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def ingest(self, events: Sequence[AnalyticsEvent]) -> int:
        """Record a batch of events.

        Events with a missing or unknown type are skipped, not rejected.

        Args:
            events: Events as received from the client.

        Returns:
            Number of events accepted.

        Raises:
            SearchValidationError: If the batch is empty or too large, or an
                event timestamp cannot be expressed in UTC.
        """
        if not events:
            raise SearchValidationError(
                "Events array is required and must not be empty",
                ["events must contain at least one event"],
            )
        if len(events) > self._max_batch:
            raise SearchValidationError(
                f"Maximum {self._max_batch} events per batch",
                [f"events must contain at most {self._max_batch} events"],
            )

        received_at = self._clock()
        accepted = [
            RecordedEvent(
                event_type=EventType(event.event_type),
                session_id=event.session_id,
                timestamp=_event_time(index, event, received_at),
                received_at=received_at,
                data=dict(event.data),
            )
            for index, event in enumerate(events)
            if event.event_type in _VALID_TYPES
        ]

        with self._lock:
            self._events.extend(accepted)

        logger.info(
            "analytics_events_ingested",
            received=len(events),
            accepted=len(accepted),
        )
        return len(accepted)

    def search_summary(self, start: date, end: date) -> SearchAnalytics:
        """Aggregate search activity over an inclusive day range.

        Args:
            start: First day of the period (UTC).
            end: Last day of the period (UTC).

        Returns:
            Scalar metrics, a daily time series and the top queries.

        Raises:
            SearchValidationError: If end is before start or the period
                spans more than max_days days.
        """
        if end < start:
            raise SearchValidationError(
                "Invalid request parameters",
                ["endDate must not be before startDate"],
            )
        if (end - start).days + 1 > self._max_days:
            raise SearchValidationError(
                "Invalid request parameters",
                [f"period must not span more than {self._max_days} days"],
            )

        with self._lock:
            events = [e for e in self._events if start <= e.timestamp.date() <= end]

        searches = [e for e in events if e.event_type is EventType.SEARCH]
        clicks = [e for e in events if e.event_type is EventType.SEARCH_RESULT_CLICK]

        result_counts = [
            e.data["resultCount"]
            for e in searches
            if _is_count(e.data.get("resultCount"))
        ]
        zero_results = sum(1 for count in result_counts if count == 0)
        sessions = {e.session_id for e in searches if e.session_id}

        summary = SearchMetrics(
            total_searches=len(searches),
            total_clicks=len(clicks),
            unique_sessions=len(sessions),
            avg_results_per_search=(
                round(sum(result_counts) / len(result_counts), 2) if result_counts else 0.0
            ),
            zero_result_rate=_ratio(zero_results, len(searches)),
            click_through_rate=_ratio(len(clicks), len(searches)),
        )

        return SearchAnalytics(
            period=AnalyticsPeriod(start=start, end=end),
            summary=summary,
            time_series=self._daily_series(searches, clicks, start, end),
            top_queries=self._top_queries(searches, clicks),
        )

    @staticmethod
    def _daily_series(
        searches: list[RecordedEvent],
        clicks: list[RecordedEvent],
        start: date,
        end: date,
    ) -> list[DailySearches]:
        search_days = Counter(e.timestamp.date() for e in searches)
        click_days = Counter(e.timestamp.date() for e in clicks)
        span = (end - start).days + 1
        days = (start + timedelta(days=offset) for offset in range(span))
        return [
            DailySearches(
                date=day.isoformat(),
                searches=search_days[day],
                clicks=click_days[day],
            )
            for day in days
        ]

    @staticmethod
    def _top_queries(
        searches: list[RecordedEvent],
        clicks: list[RecordedEvent],
    ) -> list[QueryStat]:
        counts: Counter[str] = Counter()
        query_by_search_id: dict[str, str] = {}
        for event in searches:
            query = _query_of(event)
            if query is None:
                continue
            counts[query] += 1
            search_id = event.data.get("searchId")
            if isinstance(search_id, str):
                query_by_search_id[search_id] = query

        # Clicks without a known searchId are not attributed to a query.
        clicked: defaultdict[str, int] = defaultdict(int)
        for event in clicks:
            search_id = event.data.get("searchId")
            if isinstance(search_id, str) and search_id in query_by_search_id:
                clicked[query_by_search_id[search_id]] += 1

        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [
            QueryStat(query=query, count=count, ctr=_ratio(clicked[query], count))
            for query, count in ranked[:TOP_QUERY_LIMIT]
        ]
