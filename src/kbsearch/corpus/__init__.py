"""Article corpus: records, seed loading and the in-memory store."""

from kbsearch.corpus.schemas import (
    Article,
    ArticleCreate,
    ArticleStatus,
    ArticleUpdate,
    Category,
    CategoryMeta,
)
from kbsearch.corpus.seed import SeedDocument, SeedError, load_seed
from kbsearch.corpus.store import CorpusStore

__all__ = [
    "Article",
    "ArticleCreate",
    "ArticleStatus",
    "ArticleUpdate",
    "Category",
    "CategoryMeta",
    "CorpusStore",
    "SeedDocument",
    "SeedError",
    "load_seed",
]
