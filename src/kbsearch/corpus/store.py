"""In-memory article corpus with snapshot reads and locked mutations."""

import threading
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

import structlog

from kbsearch.corpus.schemas import (
    Article,
    ArticleCreate,
    ArticleStatus,
    ArticleUpdate,
    Category,
    CategoryMeta,
    VersionHistoryEntry,
)
from kbsearch.corpus.seed import SeedDocument
from kbsearch.errors import ArticleNotFoundError, ArticleStateError

logger = structlog.get_logger()

DEFAULT_BASE_SCORE = 0.5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_article_id() -> str:
    """Generate an opaque article identifier."""
    return f"art_{uuid.uuid4().hex[:8]}"


def _revised_at(article: Article) -> datetime:
    return article.last_updated if article.version > 1 else article.created_date


def _revision(article: Article, at: datetime, by: str | None = None) -> VersionHistoryEntry:
    return VersionHistoryEntry(
        version=article.version, updated_at=at, updated_by=by or article.author
    )


class CorpusStore:
    """Owns the mutable set of article records.

    Thread-safe via a lock held for every read and write. Reads hand out
    deep copies, so callers can filter, score and sort a snapshot without
    touching shared state or observing later mutations.
    """

    def __init__(
        self,
        articles: Iterable[Article] = (),
        categories: Iterable[CategoryMeta] = (),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the store.

        Args:
            articles: Initial article records, copied on insert.
            categories: Category catalogue metadata.
            clock: Source of the current UTC time.
        """
        self._articles: dict[str, Article] = {
            article.id: article.model_copy(deep=True) for article in articles
        }
        self._categories = list(categories)
        self._history: dict[str, list[VersionHistoryEntry]] = {
            article_id: [_revision(article, _revised_at(article))]
            for article_id, article in self._articles.items()
        }
        self._clock = clock
        self._lock = threading.Lock()

    @classmethod
    def from_seed(cls, document: SeedDocument) -> "CorpusStore":
        """Build a store from a validated seed document."""
        store = cls(document.articles, document.categories)
        logger.info("corpus_seeded", article_count=len(store))
        return store

    def __len__(self) -> int:
        with self._lock:
            return len(self._articles)

    def get_all(self) -> list[Article]:
        """Return a point-in-time snapshot of every article, in insertion order."""
        with self._lock:
            return [article.model_copy(deep=True) for article in self._articles.values()]

    def get_by_id(self, article_id: str) -> Article | None:
        """Return a copy of one article, or None if absent."""
        with self._lock:
            article = self._articles.get(article_id)
            return article.model_copy(deep=True) if article else None

    def _require(self, article_id: str) -> Article:
        article = self._articles.get(article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        return article

    def _touch(self, article: Article) -> None:
        article.last_updated = max(self._clock(), article.created_date)

    def add(self, payload: ArticleCreate, author: str = "unknown") -> Article:
        """Create an article from a validated payload.

        Args:
            payload: Validated creation request.
            author: Identifier of the creating user.

        Returns:
            Copy of the stored article.
        """
        now = self._clock()
        article = Article(
            id=new_article_id(),
            title=payload.title,
            content=payload.content,
            category=payload.category,
            tags=payload.tags,
            relevance_score=DEFAULT_BASE_SCORE,
            status=payload.status,
            created_date=now,
            last_updated=now,
            view_count=0,
            author=author,
            version=1,
        )
        with self._lock:
            self._articles[article.id] = article
            self._history[article.id] = [_revision(article, now)]
            result = article.model_copy(deep=True)

        logger.info("article_created", article_id=article.id, status=article.status.value)
        return result

    def update(
        self,
        article_id: str,
        payload: ArticleUpdate,
        updated_by: str | None = None,
    ) -> Article:
        """Apply a partial update and bump the version.

        Args:
            article_id: Article to change.
            payload: Fields to overwrite; unset fields are kept.
            updated_by: Identifier recorded in the version history.

        Raises:
            ArticleNotFoundError: If the id is unknown.
        """
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        with self._lock:
            article = self._require(article_id)
            for field, value in changes.items():
                setattr(article, field, value)
            article.version += 1
            self._touch(article)
            self._history[article_id].append(
                _revision(article, article.last_updated, updated_by)
            )
            result = article.model_copy(deep=True)

        logger.info(
            "article_updated",
            article_id=article_id,
            fields=sorted(changes),
            version=result.version,
        )
        return result

    def archive(self, article_id: str) -> Article:
        """Soft-delete an article by moving it to the archived state.

        Raises:
            ArticleNotFoundError: If the id is unknown.
        """
        with self._lock:
            article = self._require(article_id)
            article.status = ArticleStatus.ARCHIVED
            self._touch(article)
            result = article.model_copy(deep=True)

        logger.info("article_archived", article_id=article_id)
        return result

    def publish(self, article_id: str) -> Article:
        """Make a draft or archived article searchable.

        Raises:
            ArticleNotFoundError: If the id is unknown.
            ArticleStateError: If the article is already published.
        """
        with self._lock:
            article = self._require(article_id)
            if article.status is ArticleStatus.PUBLISHED:
                raise ArticleStateError(
                    "Article is already published", {"articleId": article_id}
                )
            article.status = ArticleStatus.PUBLISHED
            self._touch(article)
            result = article.model_copy(deep=True)

        logger.info("article_published", article_id=article_id)
        return result

    def increment_view_count(self, article_id: str) -> Article:
        """Record a single-article retrieval.

        Raises:
            ArticleNotFoundError: If the id is unknown.
        """
        with self._lock:
            article = self._require(article_id)
            article.view_count += 1
            return article.model_copy(deep=True)

    def categories(self) -> list[Category]:
        """Return the category catalogue with live published-article counts.

        Categories that appear on articles but not in the catalogue are
        appended with a derived id so no published article is orphaned.
        """
        counts: dict[str, int] = {}
        names: dict[str, str] = {}
        for article in self.get_all():
            key = article.category.lower()
            names.setdefault(key, article.category)
            if article.status is ArticleStatus.PUBLISHED:
                counts[key] = counts.get(key, 0) + 1

        result = [
            Category(
                id=meta.id,
                name=meta.name,
                description=meta.description,
                article_count=counts.get(meta.name.lower(), 0),
            )
            for meta in self._categories
        ]
        known = {meta.name.lower() for meta in self._categories}
        for key in sorted(counts.keys() - known):
            result.append(
                Category(
                    id=f"cat_{key.replace(' ', '_')}",
                    name=names[key],
                    article_count=counts[key],
                )
            )
        return result

    def history(self, article_id: str) -> list[VersionHistoryEntry]:
        """Return the revision markers of one article, oldest first.

        Raises:
            ArticleNotFoundError: If the id is unknown.
        """
        with self._lock:
            self._require(article_id)
            return [entry.model_copy() for entry in self._history[article_id]]
