"""Search and ranking engine over the article corpus."""

from kbsearch.search.engine import SearchEngine
from kbsearch.search.schemas import (
    ArticleSummary,
    RecentSuggestion,
    SearchParams,
    SearchResponse,
    SortBy,
    Suggestion,
    SuggestionsResponse,
    TermSuggestion,
)

__all__ = [
    "ArticleSummary",
    "RecentSuggestion",
    "SearchEngine",
    "SearchParams",
    "SearchResponse",
    "SortBy",
    "Suggestion",
    "SuggestionsResponse",
    "TermSuggestion",
]
