"""Tests for recommendation prompting and reply parsing."""
import asyncio
import json

import anthropic
import httpx
import pytest

from models import PriorResult
from recommender import (
    FALLBACK_RECOMMENDATIONS,
    RECOMMENDATION_COUNT,
    RecommendationConfigError,
    RecommendationService,
    RecommendationUnavailable,
    build_prompt,
    enforce_count,
    first_array_literal,
    parse_recommendations,
    whole_document,
)

from conftest import FakeAnthropic, make_recommendations, reply_with


def test_prompt_asks_for_five_json_recommendations():
    prompt = build_prompt("space opera")

    assert '"space opera"' in prompt
    assert "exactly 5 recommendations" in prompt
    assert "JSON array" in prompt
    assert "already found" not in prompt


def test_prompt_lists_prior_results():
    prior = [PriorResult(title="Dune", author="Frank Herbert"), PriorResult(title="Emma", author="Jane Austen")]

    prompt = build_prompt("classics", prior)

    assert '"Dune" by Frank Herbert, "Emma" by Jane Austen' in prompt
    assert "complement" in prompt


def test_parse_extracts_array_from_prose():
    items = make_recommendations(5)

    records = parse_recommendations(reply_with(items))

    assert [r.model_dump() for r in records] == items


def test_parse_prose_without_array_returns_fallback():
    records = parse_recommendations("Sorry, I can't recommend anything for that search right now.")

    assert [r.model_dump() for r in records] == FALLBACK_RECOMMENDATIONS
    assert len(records) == 3


def test_parse_truncated_json_returns_fallback():
    text = '[{"title": "Dune", "author": "Frank Herbert"'

    assert [r.title for r in parse_recommendations(text)] == [r["title"] for r in FALLBACK_RECOMMENDATIONS]


def test_parse_fills_missing_fields_and_drops_junk():
    text = json.dumps([{"title": "Dune", "author": "Frank Herbert", "genre": ["SF"]}, "junk", {"author": "No Title"}])

    records = parse_recommendations(text)

    assert len(records) == 1
    assert records[0].title == "Dune"
    assert records[0].description == ""
    assert records[0].genre == "['SF']"


def test_first_array_literal_skips_broken_brackets():
    text = 'Picks [see below]: [{"title": "Dune"}] and more [1, 2]'

    assert first_array_literal(text) == [{"title": "Dune"}]
    assert first_array_literal("no brackets here") is None


def test_whole_document_requires_a_list():
    assert whole_document('{"title": "Dune"}') is None
    assert whole_document("not json") is None
    assert whole_document("[]") == []


def test_enforce_count_truncates():
    records = parse_recommendations(json.dumps(make_recommendations(7)))

    assert [r.title for r in enforce_count(records)] == [f"Book {i}" for i in range(1, 6)]


def test_enforce_count_pads_without_duplicates():
    items = [{"title": "Educated", "author": "Tara Westover"}, {"title": "Dune", "author": "Frank Herbert"}]

    records = enforce_count(parse_recommendations(json.dumps(items)))

    assert [r.title for r in records] == [
        "Educated", "Dune", "The Midnight Library", "The Seven Husbands of Evelyn Hugo",
    ]


def test_recommend_calls_model(recommendation_service, fake_anthropic):
    records = asyncio.run(recommendation_service.recommend("space", [PriorResult(title="Dune", author="Frank Herbert")]))

    assert len(records) == RECOMMENDATION_COUNT
    call = fake_anthropic.messages.calls[0]
    assert call["model"] == "test-model"
    assert call["max_tokens"] == 1000
    assert '"Dune" by Frank Herbert' in call["messages"][0]["content"]


def test_recommend_pads_short_reply():
    service = RecommendationService("key", "test-model", client=FakeAnthropic(text=reply_with(make_recommendations(1))))

    records = asyncio.run(service.recommend("space"))

    assert len(records) == 4
    assert records[0].title == "Book 1"


def test_recommend_unparseable_reply_is_soft_failure():
    service = RecommendationService("key", "test-model", client=FakeAnthropic(text="I'd suggest visiting your local branch!"))

    records = asyncio.run(service.recommend("space"))

    assert [r.model_dump() for r in records] == FALLBACK_RECOMMENDATIONS


def test_recommend_without_key_is_config_error():
    service = RecommendationService(api_key=None, model="test-model")

    assert service.configured is False
    with pytest.raises(RecommendationConfigError, match="not configured"):
        asyncio.run(service.recommend("space"))


def test_recommend_transport_failure_is_surfaced():
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    error = anthropic.APIConnectionError(request=request)
    service = RecommendationService("key", "test-model", client=FakeAnthropic(error=error))

    with pytest.raises(RecommendationUnavailable):
        asyncio.run(service.recommend("space"))


@pytest.mark.parametrize("text", ["", "   "])
def test_recommend_empty_reply_uses_fallback(text):
    service = RecommendationService("key", "test-model", client=FakeAnthropic(text=text))

    records = asyncio.run(service.recommend("space"))

    assert [r.model_dump() for r in records] == FALLBACK_RECOMMENDATIONS


def test_first_array_literal_skips_arrays_without_objects():
    text = 'see [1]: [{"title": "Dune", "author": "Frank Herbert"}]'

    assert first_array_literal(text) == [{"title": "Dune", "author": "Frank Herbert"}]
    assert [r.title for r in parse_recommendations(text)] == ["Dune"]
