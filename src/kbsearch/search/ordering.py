"""Deterministic result ordering and page slicing."""

from collections.abc import Mapping, Sequence
from typing import NamedTuple, TypeVar

from kbsearch.corpus.schemas import Article
from kbsearch.errors import SearchValidationError
from kbsearch.search.schemas import SortBy

T = TypeVar("T")

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


class Page(NamedTuple):
    """One slice of an ordered candidate set."""

    items: list
    total: int
    start_index: int
    has_more: bool


def validate_pagination(page: int, page_size: int) -> None:
    """Reject out-of-range pagination instead of clamping it.

    Raises:
        SearchValidationError: If page < 1 or page_size is outside [1, 100].
    """
    problems: list[str] = []
    if not MIN_PAGE_SIZE <= page_size <= MAX_PAGE_SIZE:
        problems.append(f"pageSize must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}")
    if page < 1:
        problems.append("page must be 1 or greater")
    if problems:
        raise SearchValidationError("Invalid request parameters", problems)


def sort_articles(
    articles: Sequence[Article],
    sort_by: SortBy,
    scores: Mapping[str, float],
) -> list[Article]:
    """Order candidates as a total order with an id tie-break.

    Args:
        articles: Candidate set.
        sort_by: Requested order.
        scores: Effective relevance score per article id.

    Returns:
        New list in result order.
    """
    if sort_by is SortBy.RELEVANCE:
        return sorted(articles, key=lambda a: (-scores[a.id], -a.view_count, a.id))
    if sort_by is SortBy.DATE:
        return sorted(articles, key=lambda a: (-a.last_updated.timestamp(), a.id))
    return sorted(articles, key=lambda a: (-a.view_count, a.id))


def paginate(items: Sequence[T], page: int, page_size: int) -> Page:
    """Slice one page out of an ordered sequence.

    A page past the end yields an empty slice with has_more False.
    """
    total = len(items)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        total=total,
        start_index=start,
        has_more=start + page_size < total,
    )
