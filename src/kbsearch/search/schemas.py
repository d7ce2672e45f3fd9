"""Pydantic schemas for search requests, responses and suggestions."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import Field

from kbsearch.corpus.schemas import CamelModel


class SortBy(str, Enum):
    """Supported result orders."""

    RELEVANCE = "relevance"
    DATE = "date"
    POPULARITY = "popularity"


class SearchParams(CamelModel):
    """Query, filters, ordering and page selection for one search.

    Range checks on page and page_size are done by the engine so an
    out-of-range value fails the call instead of being clamped.

    Attributes:
        query: Free-text query, possibly empty.
        category: Exact category filter, case-insensitive.
        tags: Tag filter; an article matches if it has any of them.
        date_from: Inclusive lower bound on createdDate (ISO-8601).
        date_to: Inclusive upper bound on createdDate (ISO-8601).
        sort_by: Result order.
        page: 1-based page number.
        page_size: Results per page, 1 to 100.
        include_ai_summary: Attach a one-sentence summary of the top result.
    """

    query: str = ""
    category: str | None = None
    tags: list[str] | None = None
    date_from: str | None = None
    date_to: str | None = None
    sort_by: SortBy = SortBy.RELEVANCE
    page: int = 1
    page_size: int = 10
    include_ai_summary: bool = False


class ArticleSummary(CamelModel):
    """One search hit, with a truncated snippet instead of the full body."""

    id: str
    title: str
    snippet: str
    category: str
    tags: list[str]
    relevance_score: float
    last_updated: datetime
    view_count: int


class SearchResponse(CamelModel):
    """Paginated search response envelope.

    Attributes:
        articles: Result summaries for the requested page.
        total: Candidate count after filtering, before pagination.
        page: Requested page number.
        page_size: Requested page size.
        has_more: Whether a later page has results.
        search_id: Identifier of this search, for click attribution.
        processing_time_ms: Wall-clock time of the ranking pipeline.
        ai_summary: Optional one-sentence summary of the top result.
    """

    articles: list[ArticleSummary]
    total: int
    page: int
    page_size: int
    has_more: bool
    search_id: str
    processing_time_ms: float
    ai_summary: str | None = None


class RecentSuggestion(CamelModel):
    """Suggestion drawn from the caller's own search history."""

    type: Literal["recent"] = "recent"
    text: str


class TermSuggestion(CamelModel):
    """Suggestion derived from corpus titles and tags.

    Attributes:
        type: "popular" for the first two corpus terms, else "suggested".
        text: The suggested term.
        count: Number of articles whose titles or tags yield this term.
    """

    type: Literal["popular", "suggested"] = "suggested"
    text: str
    count: int = 0


Suggestion = Annotated[RecentSuggestion | TermSuggestion, Field(discriminator="type")]


class SuggestionsResponse(CamelModel):
    """Autocomplete response envelope."""

    suggestions: list[Suggestion]
