"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from fastapi.testclient import TestClient

from kbsearch.app import create_app
from kbsearch.config import Settings
from kbsearch.corpus import Article, ArticleStatus, CorpusStore, load_seed
from kbsearch.search import SearchEngine

BODY = "This article body is long enough to satisfy the minimum content length rule."


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        host="127.0.0.1",
        port=8000,
        debug=True,
        json_logs=False,
    )


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Create test client with a started app, so the corpus is seeded."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_article() -> Callable[..., Article]:
    """Factory for published articles with overridable fields."""

    def _make(article_id: str, **overrides: object) -> Article:
        fields: dict[str, object] = {
            "id": article_id,
            "title": f"Article {article_id}",
            "content": BODY,
            "category": "General",
            "tags": [],
            "relevance_score": 0.5,
            "status": ArticleStatus.PUBLISHED,
            "created_date": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "last_updated": datetime(2024, 6, 1, tzinfo=timezone.utc),
            "view_count": 0,
        }
        fields.update(overrides)
        return Article(**fields)

    return _make


@pytest.fixture
def seeded_store() -> CorpusStore:
    """Store built from the packaged seed."""
    return CorpusStore.from_seed(load_seed())


@pytest.fixture
def seeded_engine(seeded_store: CorpusStore) -> SearchEngine:
    """Engine over the packaged seed."""
    return SearchEngine(seeded_store)
