"""Search and suggestion endpoint tests."""

from fastapi.testclient import TestClient


def test_search_returns_camel_case_envelope(client: TestClient) -> None:
    """The response uses camelCase field names."""
    response = client.post("/api/v1/search", json={"query": "refund"})
    assert response.status_code == 200
    data = response.json()
    assert {"articles", "total", "page", "pageSize", "hasMore", "searchId"} <= data.keys()
    assert "processingTimeMs" in data
    assert "aiSummary" not in data
    top = data["articles"][0]
    assert top["id"] == "art_00000001"
    assert top["relevanceScore"] == 1.0
    assert top["snippet"].endswith("...")


def test_search_filters_by_category_and_tags(client: TestClient) -> None:
    """Category and tag filters combine."""
    response = client.post(
        "/api/v1/search",
        json={"category": "technical support", "tags": ["troubleshooting"]},
    )
    ids = [a["id"] for a in response.json()["articles"]]
    assert ids == ["art_00000002", "art_00000011"]


def test_search_sort_by_popularity(client: TestClient) -> None:
    """Most viewed first."""
    response = client.post(
        "/api/v1/search", json={"sortBy": "popularity", "pageSize": 2}
    )
    data = response.json()
    assert [a["id"] for a in data["articles"]] == ["art_00000009", "art_00000002"]
    assert data["hasMore"] is True
    assert data["total"] == 12


def test_search_date_range(client: TestClient) -> None:
    """Only articles created inside the range are returned."""
    response = client.post(
        "/api/v1/search",
        json={"dateFrom": "2024-11-01", "dateTo": "2024-12-31T23:59:59Z"},
    )
    ids = {a["id"] for a in response.json()["articles"]}
    assert ids == {"art_00000011", "art_00000012"}


def test_search_ai_summary(client: TestClient) -> None:
    """The summary is included on request."""
    response = client.post(
        "/api/v1/search", json={"query": "refund", "includeAiSummary": True}
    )
    assert "How to Process Customer Refunds" in response.json()["aiSummary"]


def test_search_page_size_out_of_range(client: TestClient) -> None:
    """Bad pagination is a 400 with the offending parameter listed."""
    response = client.post("/api/v1/search", json={"pageSize": 101})
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "BAD_REQUEST"
    assert data["details"]["invalidParams"] == ["pageSize must be between 1 and 100"]
    assert data["correlationId"]


def test_search_bad_date_is_400(client: TestClient) -> None:
    """Unparsable date bounds are rejected."""
    response = client.post("/api/v1/search", json={"dateTo": "yesterday"})
    assert response.status_code == 400


def test_search_out_of_range_date_is_400(client: TestClient) -> None:
    """A bound that overflows once converted to UTC is a 400, not a 500."""
    response = client.post("/api/v1/search", json={"dateTo": "9999-12-31T23:00:00-05:00"})
    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


def test_search_unknown_sort_is_422(client: TestClient) -> None:
    """Schema violations report field errors."""
    response = client.post("/api/v1/search", json={"sortBy": "random"})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["details"]["fieldErrors"][0]["field"] == "sortBy"


def test_suggestions(client: TestClient) -> None:
    """Corpus terms come back typed and counted."""
    response = client.get("/api/v1/search/suggestions", params={"q": "ref"})
    assert response.status_code == 200
    suggestions = response.json()["suggestions"]
    assert [s["text"] for s in suggestions] == ["preferences", "refund", "refunds"]
    assert suggestions[0] == {"type": "popular", "text": "preferences", "count": 1}


def test_suggestions_merge_recent(client: TestClient) -> None:
    """Recent searches are listed first."""
    response = client.get(
        "/api/v1/search/suggestions",
        params={"q": "ref", "limit": 2, "recent": ["refund status"]},
    )
    suggestions = response.json()["suggestions"]
    assert suggestions[0] == {"type": "recent", "text": "refund status"}
    assert len(suggestions) == 2


def test_suggestions_short_query_is_400(client: TestClient) -> None:
    """Fragments under two characters are rejected."""
    response = client.get("/api/v1/search/suggestions", params={"q": "r"})
    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


def test_suggestions_limit_out_of_range(client: TestClient) -> None:
    """Limit must be within the configured bounds."""
    response = client.get(
        "/api/v1/search/suggestions", params={"q": "ref", "limit": 21}
    )
    assert response.status_code == 400
