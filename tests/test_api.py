"""Tests for the HTTP endpoints."""
import anthropic
import httpx
import pytest
from fastapi.testclient import TestClient

from main import app, get_recommendation_service, get_search_service
from recommender import RecommendationService

from conftest import FakeAnthropic, make_recommendations, reply_with


@pytest.fixture
def client(timeout_search_service, recommendation_service):
    app.dependency_overrides[get_search_service] = lambda: timeout_search_service
    app.dependency_overrides[get_recommendation_service] = lambda: recommendation_service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def use_recommender(service):
    app.dependency_overrides[get_recommendation_service] = lambda: service


def test_search_envelope(client):
    res = client.post("/api/search", json={"query": "hemingway", "branch": "Beaches"})

    assert res.status_code == 200
    body = res.json()
    assert body["query"] == "hemingway"
    assert body["branch"] == "Beaches"
    assert body["api_status"] == "fallback"
    assert body["source"] == "Enhanced Mock Data (TPL API unavailable)"
    assert "fallback_reason" in body
    assert body["timestamp"]
    assert body["total"] == len(body["results"]) == 3
    book = body["results"][0]
    assert book["title"] == "The Sun Also Rises"
    assert book["availability"]["branchHoldings"][0]["branch"] == "Beaches"
    assert book["availability"]["availableCopies"] <= book["availability"]["totalCopies"]


def test_seeded_search_is_repeatable(client):
    first = client.post("/api/search", json={"query": "hemingway"}).json()
    second = client.post("/api/search", json={"query": "hemingway"}).json()

    assert first["results"] == second["results"]


def test_search_single_letter_returns_popular(client):
    res = client.post("/api/search", json={"query": "a"})

    body = res.json()
    assert body["total"] == 5
    assert all("note" in book for book in body["results"])


@pytest.mark.parametrize("payload", [{"query": ""}, {"query": "   "}, {}])
def test_search_requires_query(client, payload):
    res = client.post("/api/search", json=payload)

    assert res.status_code == 400
    assert res.json()["detail"] == "Search query is required"


def test_unhandled_error_is_500(client):
    class Exploding:
        async def search(self, query, branch=None):
            raise RuntimeError("kaboom")

    app.dependency_overrides[get_search_service] = lambda: Exploding()

    res = client.post("/api/search", json={"query": "dune"})

    assert res.status_code == 500
    assert res.json() == {"detail": "kaboom"}


def test_recommendations(client, fake_anthropic):
    res = client.post("/api/recommendations", json={
        "query": "space",
        "searchResults": [{"title": "Dune", "author": "Frank Herbert"}],
    })

    assert res.status_code == 200
    body = res.json()
    assert body["query"] == "space"
    assert body["totalRecommendations"] == 5
    assert set(body["recommendations"][0]) == {"title", "author", "description", "reason", "genre"}
    assert '"Dune" by Frank Herbert' in fake_anthropic.messages.calls[0]["messages"][0]["content"]


def test_recommendations_get(client):
    res = client.get("/api/recommendations", params={"q": "space"})

    assert res.status_code == 200
    assert res.json()["totalRecommendations"] == 5


def test_recommendations_get_requires_q(client):
    res = client.get("/api/recommendations")

    assert res.status_code == 400


def test_recommendations_require_query(client):
    res = client.post("/api/recommendations", json={"query": " "})

    assert res.status_code == 400
    assert res.json()["detail"] == "Query is required for recommendations"


def test_recommendations_unconfigured_key(client):
    use_recommender(RecommendationService(api_key=None, model="test-model"))

    res = client.post("/api/recommendations", json={"query": "space"})

    assert res.status_code == 500
    assert res.json()["detail"] == "Anthropic API key not configured"


def test_recommendations_transport_failure(client):
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    error = anthropic.APITimeoutError(request=request)
    use_recommender(RecommendationService("key", "test-model", client=FakeAnthropic(error=error)))

    res = client.post("/api/recommendations", json={"query": "space"})

    assert res.status_code == 502
    assert res.json()["detail"].startswith("AI service error")


def test_recommendations_parse_failure_is_soft(client):
    use_recommender(RecommendationService("key", "test-model", client=FakeAnthropic(text="Just prose.")))

    res = client.post("/api/recommendations", json={"query": "space"})

    assert res.status_code == 200
    assert res.json()["totalRecommendations"] == 3


def test_discover(client):
    use_recommender(RecommendationService("key", "test-model", client=FakeAnthropic(text=reply_with(make_recommendations(5)))))

    res = client.post("/api/discover", json={"query": "dune"})

    assert res.status_code == 200
    body = res.json()
    assert body["errors"] == {}
    assert body["search"]["results"][0]["title"] == "Dune"
    assert body["recommendations"]["totalRecommendations"] == 5


def test_discover_requires_query(client):
    assert client.post("/api/discover", json={"query": ""}).status_code == 400


def test_branches(client):
    branches = client.get("/api/branches").json()["branches"]

    assert "Toronto Reference Library" in branches


def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "ok"
    assert body["model_configured"] is True


def test_home_page(client):
    res = client.get("/")

    assert res.status_code == 200
    assert "TPL Search" in res.text
