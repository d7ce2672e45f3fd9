"""Client analytics ingestion and search reporting."""

from kbsearch.analytics.recorder import AnalyticsRecorder
from kbsearch.analytics.schemas import (
    AnalyticsEvent,
    EventBatch,
    EventBatchAccepted,
    EventType,
    SearchAnalytics,
)

__all__ = [
    "AnalyticsEvent",
    "AnalyticsRecorder",
    "EventBatch",
    "EventBatchAccepted",
    "EventType",
    "SearchAnalytics",
]
