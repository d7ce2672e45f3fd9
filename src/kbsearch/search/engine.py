"""Query orchestrator composing filtering, scoring, ordering and paging."""

import time
import uuid
from collections.abc import Iterable

import structlog

from kbsearch.corpus.schemas import Article
from kbsearch.corpus.store import CorpusStore
from kbsearch.errors import SearchValidationError
from kbsearch.search.filters import apply_filters, normalize_query
from kbsearch.search.ordering import paginate, sort_articles, validate_pagination
from kbsearch.search.schemas import (
    ArticleSummary,
    SearchParams,
    SearchResponse,
    Suggestion,
)
from kbsearch.search.scoring import effective_scores
from kbsearch.search.suggestions import extract_suggestions

logger = structlog.get_logger()

DEFAULT_SNIPPET_LENGTH = 200
ELLIPSIS = "..."


def make_snippet(content: str, length: int = DEFAULT_SNIPPET_LENGTH) -> str:
    """First ``length`` characters of the body followed by an ellipsis."""
    return content[:length] + ELLIPSIS


def summarize(query: str, top_title: str) -> str:
    """Template summary referencing the top result."""
    return (
        f'Based on your search for "{query}", the most relevant article is '
        f'"{top_title}". This article covers the key aspects of your query.'
    )


class SearchEngine:
    """Keyword search and autocomplete over a corpus store.

    Each call works on a single snapshot taken at the start, so results
    are internally consistent even while the store is being mutated.
    The engine never writes to the store.
    """

    def __init__(
        self,
        store: CorpusStore,
        snippet_length: int = DEFAULT_SNIPPET_LENGTH,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Corpus to read snapshots from.
            snippet_length: Characters of content kept per result snippet.
        """
        self._store = store
        self._snippet_length = snippet_length

    def search(self, params: SearchParams) -> SearchResponse:
        """Run one search request.

        Args:
            params: Query, filters, ordering and page selection.

        Returns:
            Ranked, paginated response.

        Raises:
            SearchValidationError: If pagination is out of range or a date
                bound cannot be parsed.
        """
        validate_pagination(params.page, params.page_size)

        start = time.perf_counter()
        snapshot = self._store.get_all()
        query = normalize_query(params.query)

        candidates = apply_filters(snapshot, params)
        scores = effective_scores(candidates, query)
        ordered = sort_articles(candidates, params.sort_by, scores)
        page = paginate(ordered, params.page, params.page_size)
        duration_ms = (time.perf_counter() - start) * 1000

        articles = [self._summarize_article(a, scores[a.id]) for a in page.items]
        response = SearchResponse(
            articles=articles,
            total=page.total,
            page=params.page,
            page_size=params.page_size,
            has_more=page.has_more,
            search_id=f"srch_{uuid.uuid4().hex[:8]}",
            processing_time_ms=round(duration_ms, 3),
        )

        if params.include_ai_summary and query and articles:
            response.ai_summary = summarize(params.query, articles[0].title)

        logger.info(
            "search_completed",
            search_id=response.search_id,
            query=params.query,
            sort_by=params.sort_by.value,
            total=page.total,
            returned=len(articles),
            duration_ms=response.processing_time_ms,
        )
        return response

    def suggest(
        self,
        fragment: str,
        limit: int,
        recent: Iterable[str] = (),
    ) -> list[Suggestion]:
        """Autocomplete a partial query.

        Args:
            fragment: Text typed so far. Minimum length is the caller's concern.
            limit: Maximum number of suggestions.
            recent: Caller-supplied history terms, most recent first.

        Returns:
            Recent matches followed by corpus terms.

        Raises:
            SearchValidationError: If limit is below 1.
        """
        if limit < 1:
            raise SearchValidationError(
                "Invalid request parameters", ["limit must be 1 or greater"]
            )
        suggestions = extract_suggestions(self._store.get_all(), fragment, limit, recent)
        logger.debug("suggestions_built", fragment=fragment, returned=len(suggestions))
        return suggestions

    def _summarize_article(self, article: Article, score: float) -> ArticleSummary:
        return ArticleSummary(
            id=article.id,
            title=article.title,
            snippet=make_snippet(article.content, self._snippet_length),
            category=article.category,
            tags=list(article.tags),
            relevance_score=score,
            last_updated=article.last_updated,
            view_count=article.view_count,
        )
