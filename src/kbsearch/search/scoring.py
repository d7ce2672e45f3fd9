"""Query-time relevance boosting."""

from collections.abc import Sequence

from kbsearch.corpus.schemas import Article

TITLE_BOOST = 0.2
TAG_BOOST = 0.1
MAX_SCORE = 1.0
SCORE_PRECISION = 6


def relevance_boost(article: Article, query: str) -> float:
    """Additive boost for where the query matched.

    Args:
        article: Candidate article.
        query: Trimmed, lowercased, non-empty query.
    """
    boost = 0.0
    if query in article.title.lower():
        boost += TITLE_BOOST
    if any(query in tag.lower() for tag in article.tags):
        boost += TAG_BOOST
    return boost


def effective_scores(articles: Sequence[Article], query: str) -> dict[str, float]:
    """Compute per-article scores for one query, keyed by article id.

    Base scores on the articles are left untouched. An empty query
    passes them through unmodified. Boosted scores are rounded so that
    equal sums compare equal in the relevance tie-break.
    """
    if not query:
        return {a.id: a.relevance_score for a in articles}
    return {
        a.id: round(
            min(MAX_SCORE, a.relevance_score + relevance_boost(a, query)),
            SCORE_PRECISION,
        )
        for a in articles
    }
