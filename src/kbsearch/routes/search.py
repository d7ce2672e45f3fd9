"""Search and autocomplete API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request

from kbsearch.errors import SearchValidationError
from kbsearch.search.schemas import SearchParams, SearchResponse, SuggestionsResponse

if TYPE_CHECKING:
    from kbsearch.config import Settings
    from kbsearch.search.engine import SearchEngine

router = APIRouter(prefix="/search", tags=["search"])


@router.post(
    "",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    summary="Search published articles",
    description=(
        "Keyword search with category, tag and date filters, relevance, "
        "date or popularity ordering, and pagination."
    ),
)
async def search(request: Request, params: SearchParams) -> SearchResponse:
    """Run a keyword search.

    Args:
        request: FastAPI request (provides access to app state).
        params: Query, filters, ordering and page selection.

    Returns:
        Ranked, paginated results.
    """
    engine: SearchEngine = request.app.state.engine
    return engine.search(params)


@router.get(
    "/suggestions",
    response_model=SuggestionsResponse,
    summary="Autocomplete suggestions",
    description="Suggests terms from article titles and tags for a partial query.",
)
async def suggestions(
    request: Request,
    q: str = Query(default="", description="Partial query"),
    limit: int = Query(default=5, description="Maximum suggestions"),
    recent: list[str] | None = Query(
        default=None,
        description="Caller's recent searches, most recent first",
    ),
) -> SuggestionsResponse:
    """Suggest completions for a partial query.

    Args:
        request: FastAPI request (provides access to app state).
        q: Partial query, at least the configured minimum length.
        limit: Maximum number of suggestions (1 to the configured maximum).
        recent: Caller-supplied history merged ahead of corpus terms.

    Returns:
        Ordered suggestions.

    Raises:
        SearchValidationError: If q is too short or limit is out of range.
    """
    settings: Settings = request.app.state.settings
    engine: SearchEngine = request.app.state.engine

    problems = []
    if len(q.strip()) < settings.suggest_min_length:
        problems.append(
            f'Query parameter "q" must be at least {settings.suggest_min_length} characters'
        )
    if not 1 <= limit <= settings.suggest_max_limit:
        problems.append(f"limit must be between 1 and {settings.suggest_max_limit}")
    if problems:
        raise SearchValidationError(problems[0], problems)

    return SuggestionsResponse(suggestions=engine.suggest(q, limit, recent or ()))
