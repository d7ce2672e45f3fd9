"""Query orchestrator tests."""

import threading
from collections.abc import Callable

import pytest

from kbsearch.corpus import Article, ArticleStatus, CorpusStore
from kbsearch.errors import SearchValidationError
from kbsearch.search import SearchEngine, SearchParams, SortBy
from kbsearch.search.filters import matches_query


@pytest.fixture
def refund_login_engine(make_article: Callable[..., Article]) -> SearchEngine:
    """Two-article corpus: a refund guide and a login article."""
    store = CorpusStore(
        [
            make_article(
                "A",
                title="Refund Guide",
                category="Billing",
                tags=["refund"],
                relevance_score=0.9,
                view_count=100,
            ),
            make_article(
                "B",
                title="Login",
                content="If login fails, try a refund of your session first. " * 2,
                category="Tech",
                tags=["auth"],
                relevance_score=0.6,
                view_count=5,
            ),
        ]
    )
    return SearchEngine(store)


def test_refund_example(refund_login_engine: SearchEngine) -> None:
    """The boosted title match ranks first with a capped score."""
    response = refund_login_engine.search(SearchParams(query="refund"))
    assert [a.id for a in response.articles] == ["A", "B"]
    assert response.articles[0].relevance_score == 1.0
    assert response.articles[1].relevance_score == 0.6
    assert response.total == 2
    assert response.has_more is False


def test_boosted_score_ties_unboosted_score(
    make_article: Callable[..., Article],
) -> None:
    """0.7 plus a title boost ties 0.9, so views decide the order."""
    store = CorpusStore(
        [
            make_article(
                "y",
                content="How a refund is issued after a duplicate card charge.",
                relevance_score=0.9,
                view_count=1,
            ),
            make_article("x", title="Refund Guide", relevance_score=0.7, view_count=100),
        ]
    )
    response = SearchEngine(store).search(SearchParams(query="refund"))
    assert [(a.id, a.relevance_score) for a in response.articles] == [
        ("x", 0.9),
        ("y", 0.9),
    ]


def test_base_scores_unchanged_after_search(
    refund_login_engine: SearchEngine,
) -> None:
    """Repeated searches never write boosted scores back."""
    for _ in range(3):
        refund_login_engine.search(SearchParams(query="refund"))
    response = refund_login_engine.search(SearchParams())
    scores = {a.id: a.relevance_score for a in response.articles}
    assert scores == {"A": 0.9, "B": 0.6}


@pytest.mark.parametrize("page_size", [0, 101])
def test_page_size_out_of_range(
    refund_login_engine: SearchEngine, page_size: int
) -> None:
    """Invalid page sizes fail the call."""
    with pytest.raises(SearchValidationError) as exc_info:
        refund_login_engine.search(SearchParams(page_size=page_size))
    assert exc_info.value.details == {
        "invalidParams": ["pageSize must be between 1 and 100"]
    }


def test_past_the_end_page(refund_login_engine: SearchEngine) -> None:
    """A page after the last is empty with the real total."""
    response = refund_login_engine.search(SearchParams(page=5, page_size=10))
    assert response.articles == []
    assert response.total == 2
    assert response.has_more is False


def test_pagination_invariants(seeded_engine: SearchEngine) -> None:
    """Pages never exceed their size or run past the total."""
    for page in range(1, 5):
        response = seeded_engine.search(SearchParams(page=page, page_size=5))
        start = (page - 1) * 5
        assert len(response.articles) <= 5
        if response.articles:
            assert start + len(response.articles) <= response.total
        else:
            assert response.has_more is False


def test_only_published_are_returned(seeded_engine: SearchEngine) -> None:
    """Draft and archived seed articles are never results."""
    response = seeded_engine.search(SearchParams(query="refund", page_size=100))
    ids = {a.id for a in response.articles}
    assert "art_00000014" not in ids
    assert response.articles[0].id == "art_00000001"


def test_every_result_matches_query(seeded_store: CorpusStore) -> None:
    """Non-empty queries only return articles matching in title, content or tags."""
    response = SearchEngine(seeded_store).search(
        SearchParams(query="Shipping", page_size=100)
    )
    assert response.total > 0
    for summary in response.articles:
        article = seeded_store.get_by_id(summary.id)
        assert article is not None
        assert matches_query(article, "shipping")


def test_date_sort_breaks_ties_on_id(make_article: Callable[..., Article]) -> None:
    """Articles updated at the same moment order by id."""
    store = CorpusStore([make_article("art_b"), make_article("art_a")])
    response = SearchEngine(store).search(SearchParams(sort_by=SortBy.DATE))
    assert [a.id for a in response.articles] == ["art_a", "art_b"]


def test_snippet_is_truncated(make_article: Callable[..., Article]) -> None:
    """Snippets keep the configured prefix plus an ellipsis."""
    store = CorpusStore([make_article("art_1", content="x" * 300)])
    summary = SearchEngine(store, snippet_length=200).search(SearchParams()).articles[0]
    assert summary.snippet == "x" * 200 + "..."


def test_response_metadata(refund_login_engine: SearchEngine) -> None:
    """Each response carries a search id and timing."""
    response = refund_login_engine.search(SearchParams(query="refund"))
    assert response.search_id.startswith("srch_")
    assert len(response.search_id) == len("srch_") + 8
    assert response.processing_time_ms >= 0


def test_ai_summary_names_top_result(refund_login_engine: SearchEngine) -> None:
    """The summary references the query and the top title."""
    response = refund_login_engine.search(
        SearchParams(query="refund", include_ai_summary=True)
    )
    assert response.ai_summary == (
        'Based on your search for "refund", the most relevant article is '
        '"Refund Guide". This article covers the key aspects of your query.'
    )


def test_no_ai_summary_without_query(refund_login_engine: SearchEngine) -> None:
    """An empty query yields no summary."""
    response = refund_login_engine.search(SearchParams(include_ai_summary=True))
    assert response.ai_summary is None


def test_search_sees_store_mutations(make_article: Callable[..., Article]) -> None:
    """Each search snapshots the current corpus."""
    store = CorpusStore([make_article("art_1", status=ArticleStatus.DRAFT)])
    engine = SearchEngine(store)
    assert engine.search(SearchParams()).total == 0
    store.publish("art_1")
    assert engine.search(SearchParams()).total == 1


def test_search_is_consistent_under_concurrent_writes(
    make_article: Callable[..., Article],
) -> None:
    """Searches racing view counts and archiving see whole snapshots."""
    ids = [f"art_{n:03d}" for n in range(60)]
    store = CorpusStore([make_article(article_id) for article_id in ids])
    engine = SearchEngine(store)
    archived: list[str] = []
    errors: list[Exception] = []

    def write() -> None:
        try:
            for article_id in ids[::2]:
                for other in ids[1::2]:
                    store.increment_view_count(other)
                store.archive(article_id)
                archived.append(article_id)
        except Exception as e:  # surfaced by the assertion below
            errors.append(e)

    writer = threading.Thread(target=write)
    writer.start()
    totals = []
    while writer.is_alive() or not totals:
        already_archived = set(archived)
        response = engine.search(SearchParams(page_size=100))
        hits = [a.id for a in response.articles]
        assert response.total == len(hits)
        assert len(set(hits)) == len(hits)
        assert already_archived.isdisjoint(hits)
        totals.append(response.total)
    writer.join()

    assert errors == []
    assert totals == sorted(totals, reverse=True)
    final = engine.search(SearchParams(page_size=100))
    assert [a.id for a in final.articles] == sorted(ids[1::2])
    assert {a.view_count for a in final.articles} == {30}


def test_suggest_rejects_zero_limit(seeded_engine: SearchEngine) -> None:
    """Limit must be at least one."""
    with pytest.raises(SearchValidationError):
        seeded_engine.suggest("ref", 0)
