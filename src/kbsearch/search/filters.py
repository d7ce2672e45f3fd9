"""Filter pipeline reducing a corpus snapshot to the candidate set.

Steps run in a fixed order and only ever narrow the list. They never
reorder or score it.
"""

from collections.abc import Sequence
from datetime import datetime

from kbsearch.corpus.schemas import Article, ArticleStatus, as_utc
from kbsearch.errors import SearchValidationError
from kbsearch.search.schemas import SearchParams


def normalize_query(query: str) -> str:
    """Trim and lowercase a raw query. Empty means "match everything"."""
    return query.strip().lower()


def parse_date_bound(value: str, name: str) -> datetime:
    """Parse an ISO-8601 date or datetime filter bound.

    Values without a timezone are taken as UTC.

    Args:
        value: Raw bound from the request.
        name: Parameter name, used in the error message.

    Returns:
        Timezone-aware datetime.

    Raises:
        SearchValidationError: If the value is not a valid ISO-8601 string
            or falls outside the representable UTC range.
    """
    try:
        return as_utc(datetime.fromisoformat(value.strip()))
    except (ValueError, OverflowError) as e:
        raise SearchValidationError(
            "Invalid request parameters",
            [f"{name} must be an ISO-8601 date or datetime, got {value!r}"],
        ) from e


def matches_query(article: Article, query: str) -> bool:
    """Literal, case-insensitive substring match on title, content or any tag.

    Args:
        article: Candidate article.
        query: Already trimmed and lowercased query.
    """
    return (
        query in article.title.lower()
        or query in article.content.lower()
        or any(query in tag.lower() for tag in article.tags)
    )


def filter_published(articles: Sequence[Article]) -> list[Article]:
    return [a for a in articles if a.status is ArticleStatus.PUBLISHED]


def filter_query(articles: Sequence[Article], query: str) -> list[Article]:
    if not query:
        return list(articles)
    return [a for a in articles if matches_query(a, query)]


def filter_category(articles: Sequence[Article], category: str | None) -> list[Article]:
    if not category:
        return list(articles)
    wanted = category.lower()
    return [a for a in articles if a.category.lower() == wanted]


def filter_tags(articles: Sequence[Article], tags: Sequence[str] | None) -> list[Article]:
    wanted = {tag.strip().lower() for tag in tags or () if tag.strip()}
    if not wanted:
        return list(articles)
    return [a for a in articles if any(tag.lower() in wanted for tag in a.tags)]


def filter_date_range(
    articles: Sequence[Article],
    date_from: datetime | None,
    date_to: datetime | None,
) -> list[Article]:
    result = list(articles)
    if date_from is not None:
        result = [a for a in result if a.created_date >= date_from]
    if date_to is not None:
        result = [a for a in result if a.created_date <= date_to]
    return result


def apply_filters(articles: Sequence[Article], params: SearchParams) -> list[Article]:
    """Run the full pipeline for one request.

    Date bounds are parsed up front so a malformed bound fails the call
    before any filtering happens.

    Args:
        articles: Corpus snapshot.
        params: Search request.

    Returns:
        Candidate set in snapshot order.

    Raises:
        SearchValidationError: If a date bound cannot be parsed.
    """
    date_from = parse_date_bound(params.date_from, "dateFrom") if params.date_from else None
    date_to = parse_date_bound(params.date_to, "dateTo") if params.date_to else None

    candidates = filter_published(articles)
    candidates = filter_query(candidates, normalize_query(params.query))
    candidates = filter_category(candidates, params.category)
    candidates = filter_tags(candidates, params.tags)
    return filter_date_range(candidates, date_from, date_to)
