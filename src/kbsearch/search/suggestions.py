"""Autocomplete term extraction from article titles and tags."""

from collections import Counter
from collections.abc import Iterable, Sequence

from kbsearch.corpus.schemas import Article
from kbsearch.search.schemas import RecentSuggestion, Suggestion, TermSuggestion

MIN_TITLE_WORD_LENGTH = 4
POPULAR_SLOTS = 2


def article_terms(article: Article) -> set[str]:
    """Suggestion terms contributed by one article.

    Title words longer than three characters, lowercased and split on
    whitespace, plus every tag.
    """
    words = {
        word for word in article.title.lower().split()
        if len(word) >= MIN_TITLE_WORD_LENGTH
    }
    return words | {tag.lower() for tag in article.tags}


def term_frequencies(articles: Iterable[Article]) -> Counter[str]:
    """Count, per term, how many articles contribute it.

    Status is ignored; every article in the snapshot is a source.
    """
    counts: Counter[str] = Counter()
    for article in articles:
        counts.update(article_terms(article))
    return counts


def match_recent(recent: Iterable[str], fragment: str) -> list[str]:
    """History entries containing the fragment, first occurrence wins."""
    seen: set[str] = set()
    matches: list[str] = []
    for entry in recent:
        text = entry.strip()
        key = text.lower()
        if text and fragment in key and key not in seen:
            seen.add(key)
            matches.append(text)
    return matches


def extract_suggestions(
    articles: Sequence[Article],
    fragment: str,
    limit: int,
    recent: Iterable[str] = (),
) -> list[Suggestion]:
    """Build the autocomplete list for a fragment.

    Recent history matches come first. Corpus terms follow in
    lexicographic order, skipping any already offered as recent. The
    first two corpus terms are labelled popular.

    Args:
        articles: Corpus snapshot.
        fragment: Text typed so far; matched as a case-insensitive substring.
        limit: Maximum number of suggestions returned.
        recent: Caller-supplied history, most recent first.

    Returns:
        At most ``limit`` suggestions.
    """
    needle = fragment.strip().lower()
    recent_texts = match_recent(recent, needle)[:limit]
    suggestions: list[Suggestion] = [RecentSuggestion(text=text) for text in recent_texts]

    taken = {text.lower() for text in recent_texts}
    counts = term_frequencies(articles)
    terms = sorted(term for term in counts if needle in term and term not in taken)

    for index, term in enumerate(terms[: limit - len(suggestions)]):
        suggestions.append(
            TermSuggestion(
                type="popular" if index < POPULAR_SLOTS else "suggested",
                text=term,
                count=counts[term],
            )
        )
    return suggestions
