"""Pydantic schemas for corpus records and CRUD payloads."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire.

    Python attributes stay snake_case; input accepts either form.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArticleStatus(str, Enum):
    """Article lifecycle states. Only published articles are searchable."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


def normalize_tags(tags: list[str]) -> list[str]:
    """Lowercase and strip tags, dropping blanks and repeats.

    Args:
        tags: Raw tag values.

    Returns:
        Normalized tags in their original order.
    """
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        value = tag.strip().lower()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Article(CamelModel):
    """A knowledge article, the unit of retrieval.

    Attributes:
        id: Opaque stable identifier, immutable after creation.
        title: Article title, a match target.
        content: Article body, a match target.
        category: Single-valued classification.
        tags: Lowercase tags used for filtering and suggestions.
        relevance_score: Static base score in [0, 1].
        status: Lifecycle state.
        created_date: Creation timestamp (UTC).
        last_updated: Last modification timestamp (UTC), never before created_date.
        view_count: Number of single-article retrievals.
        author: Identifier of the creating user.
        version: Revision number, bumped on every update.
    """

    id: str
    title: str
    content: str
    category: str
    tags: list[str] = Field(default_factory=list)
    relevance_score: float = Field(default=0.5, ge=0.0, le=1.0)
    status: ArticleStatus = ArticleStatus.DRAFT
    created_date: datetime
    last_updated: datetime
    view_count: int = Field(default=0, ge=0)
    author: str = "system"
    version: int = Field(default=1, ge=1)

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v: list[str]) -> list[str]:
        """Store tags in lowercase form."""
        return normalize_tags(v)

    @field_validator("created_date", "last_updated")
    @classmethod
    def utc_timestamps(cls, v: datetime) -> datetime:
        """Normalize timestamps to UTC."""
        return as_utc(v)

    @model_validator(mode="after")
    def check_timestamps(self) -> "Article":
        """Reject records updated before they were created."""
        if self.last_updated < self.created_date:
            raise ValueError("lastUpdated must not precede createdDate")
        return self


class VersionHistoryEntry(CamelModel):
    """One revision marker in an article's history."""

    version: int
    updated_at: datetime
    updated_by: str


class ArticleDetail(Article):
    """Single-article response, optionally carrying version history."""

    version_history: list[VersionHistoryEntry] | None = None


class ArticleCreate(CamelModel):
    """Request body for creating an article."""

    title: str = Field(min_length=5, max_length=255)
    content: str = Field(min_length=50)
    category: str = Field(min_length=1, max_length=100)
    tags: list[str] = Field(default_factory=list)
    status: ArticleStatus = ArticleStatus.DRAFT

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v: list[str]) -> list[str]:
        """Store tags in lowercase form."""
        return normalize_tags(v)


class ArticleUpdate(CamelModel):
    """Request body for a partial article update."""

    title: str | None = Field(default=None, min_length=5, max_length=255)
    content: str | None = Field(default=None, min_length=50)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    tags: list[str] | None = None
    status: ArticleStatus | None = None

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v: list[str] | None) -> list[str] | None:
        """Store tags in lowercase form."""
        return normalize_tags(v) if v is not None else None


class ArticleList(CamelModel):
    """Paginated article listing."""

    articles: list[Article]
    total: int
    page: int
    page_size: int
    has_more: bool


class CategoryMeta(CamelModel):
    """Static category description from the seed catalogue."""

    id: str
    name: str = Field(min_length=1)
    description: str | None = None


class Category(CategoryMeta):
    """Category with a live count of published articles."""

    article_count: int = 0


class CategoryList(BaseModel):
    """Category catalogue response."""

    categories: list[Category]
