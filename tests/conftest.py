"""Shared fakes: Symphony over httpx.MockTransport and an in-memory Anthropic client."""
import json
from types import SimpleNamespace

import httpx
import pytest

from recommender import RecommendationService
from search_service import CatalogueSearchService
from symphony import SymphonyClient

BASE_URL = "https://catalog.test"


def symphony_transport(payload=None, status_code=200, exc=None, seen=None):
    """MockTransport answering every request the same way."""
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if exc is not None:
            raise exc(f"simulated {exc.__name__}", request=request)
        if isinstance(payload, (str, bytes)):
            return httpx.Response(status_code, content=payload)
        return httpx.Response(status_code, json=payload)
    return httpx.MockTransport(handler)


def reply_with(items) -> str:
    return "Here are some picks you might enjoy:\n" + json.dumps(items, indent=2) + "\nHappy reading!"


class FakeMessages:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.text)])


class FakeAnthropic:
    def __init__(self, text="", error=None):
        self.messages = FakeMessages(text, error)


def make_recommendations(n: int) -> list[dict]:
    return [
        {
            "title": f"Book {i}",
            "author": f"Author {i}",
            "description": f"Description {i}",
            "reason": f"Reason {i}",
            "genre": "Fiction",
        }
        for i in range(1, n + 1)
    ]


@pytest.fixture
def timeout_search_service():
    """Search service whose live catalogue always times out."""
    client = SymphonyClient(BASE_URL, transport=symphony_transport(exc=httpx.ReadTimeout))
    return CatalogueSearchService(client, seed=7)


@pytest.fixture
def fake_anthropic():
    return FakeAnthropic(text=reply_with(make_recommendations(5)))


@pytest.fixture
def recommendation_service(fake_anthropic):
    return RecommendationService(api_key="test-key", model="test-model", max_tokens=1000, client=fake_anthropic)
