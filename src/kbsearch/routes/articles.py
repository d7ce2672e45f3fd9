"""Article CRUD and lifecycle endpoints."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request, Response, status

from kbsearch.corpus.schemas import (
    Article,
    ArticleCreate,
    ArticleDetail,
    ArticleList,
    ArticleStatus,
    ArticleUpdate,
)
from kbsearch.search.ordering import paginate, validate_pagination

if TYPE_CHECKING:
    from kbsearch.corpus.store import CorpusStore

router = APIRouter(prefix="/articles", tags=["articles"])


class ListSortBy(str, Enum):
    """Orderings offered by the admin listing."""

    CREATED_DATE = "createdDate"
    LAST_UPDATED = "lastUpdated"
    TITLE = "title"
    VIEW_COUNT = "viewCount"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


_SORT_KEYS = {
    ListSortBy.CREATED_DATE: lambda a: a.created_date,
    ListSortBy.LAST_UPDATED: lambda a: a.last_updated,
    ListSortBy.TITLE: lambda a: a.title.lower(),
    ListSortBy.VIEW_COUNT: lambda a: a.view_count,
}


def sort_listing(
    articles: list[Article], sort_by: ListSortBy, order: SortOrder
) -> list[Article]:
    """Order a listing with an ascending id tie-break in either direction."""
    by_id = sorted(articles, key=lambda a: a.id)
    return sorted(by_id, key=_SORT_KEYS[sort_by], reverse=order is SortOrder.DESC)


def _store(request: Request) -> CorpusStore:
    return request.app.state.store


@router.get(
    "",
    response_model=ArticleList,
    summary="List articles",
    description="Admin listing across every status with filtering and ordering.",
)
async def list_articles(
    request: Request,
    category: str | None = Query(default=None, description="Exact category"),
    status_filter: ArticleStatus | None = Query(
        default=None, alias="status", description="Lifecycle state"
    ),
    sort_by: ListSortBy = Query(default=ListSortBy.LAST_UPDATED, alias="sortBy"),
    sort_order: SortOrder = Query(default=SortOrder.DESC, alias="sortOrder"),
    page: int = Query(default=1, description="1-based page number"),
    page_size: int = Query(default=10, alias="pageSize", description="Results per page"),
) -> ArticleList:
    """List articles for administration.

    Args:
        request: FastAPI request (provides access to app state).
        category: Case-insensitive exact category filter.
        status_filter: Lifecycle state filter.
        sort_by: Field to order by.
        sort_order: Ascending or descending.
        page: 1-based page number.
        page_size: Results per page, 1 to 100.

    Returns:
        One page of full article records.
    """
    validate_pagination(page, page_size)

    articles = _store(request).get_all()
    if category:
        articles = [a for a in articles if a.category.lower() == category.lower()]
    if status_filter is not None:
        articles = [a for a in articles if a.status is status_filter]

    result = paginate(sort_listing(articles, sort_by, sort_order), page, page_size)
    return ArticleList(
        articles=result.items,
        total=result.total,
        page=page,
        page_size=page_size,
        has_more=result.has_more,
    )


@router.get(
    "/{article_id}",
    response_model=ArticleDetail,
    response_model_exclude_none=True,
    summary="Get an article",
    description="Returns one article and counts the retrieval as a view.",
)
async def get_article(
    request: Request,
    article_id: str,
    include_history: bool = Query(default=False, alias="includeHistory"),
) -> ArticleDetail:
    """Fetch a single article.

    Args:
        request: FastAPI request (provides access to app state).
        article_id: Article identifier.
        include_history: Attach version history.

    Returns:
        Full article, with versionHistory when requested.
    """
    store = _store(request)
    article = store.increment_view_count(article_id)
    detail = ArticleDetail(**article.model_dump())
    if include_history:
        detail.version_history = store.history(article_id)
    return detail


@router.post(
    "",
    response_model=Article,
    status_code=status.HTTP_201_CREATED,
    summary="Create an article",
)
async def create_article(
    request: Request, response: Response, payload: ArticleCreate
) -> Article:
    """Create an article, draft unless a status is given.

    Args:
        request: FastAPI request (provides access to app state).
        response: Outgoing response, for the Location header.
        payload: Validated article fields.

    Returns:
        The stored article.
    """
    article = _store(request).add(payload)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{article.id}"
    return article


@router.put("/{article_id}", response_model=Article, summary="Update an article")
async def update_article(
    request: Request, article_id: str, payload: ArticleUpdate
) -> Article:
    """Apply a partial update.

    Args:
        request: FastAPI request (provides access to app state).
        article_id: Article identifier.
        payload: Fields to overwrite.

    Returns:
        The updated article.
    """
    return _store(request).update(article_id, payload)


@router.delete(
    "/{article_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Archive an article",
)
async def delete_article(request: Request, article_id: str) -> Response:
    """Soft-delete an article by archiving it."""
    _store(request).archive(article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{article_id}/publish",
    response_model=Article,
    summary="Publish an article",
)
async def publish_article(request: Request, article_id: str) -> Article:
    """Make an article searchable.

    Raises:
        ArticleNotFoundError: If the id is unknown.
        ArticleStateError: If the article is already published.
    """
    return _store(request).publish(article_id)
