import json
import logging

import anthropic

from models import PriorResult, RecommendationRecord

logger = logging.getLogger(__name__)

RECOMMENDATION_COUNT = 5

FALLBACK_RECOMMENDATIONS = [
    {
        "title": "The Midnight Library",
        "author": "Matt Haig",
        "description": "A novel about life's infinite possibilities and the choices that shape our destiny.",
        "reason": "A thoughtful exploration of life's paths and possibilities",
        "genre": "Contemporary Fiction",
    },
    {
        "title": "Educated",
        "author": "Tara Westover",
        "description": "A memoir about education, family, and the struggle between loyalty and self-discovery.",
        "reason": "An inspiring story of personal growth and transformation",
        "genre": "Memoir",
    },
    {
        "title": "The Seven Husbands of Evelyn Hugo",
        "author": "Taylor Jenkins Reid",
        "description": "A captivating novel about a reclusive Hollywood icon's life and secrets.",
        "reason": "A compelling character-driven story with mystery and glamour",
        "genre": "Historical Fiction",
    },
]


class RecommendationConfigError(RuntimeError):
    """The model host credential is missing."""


class RecommendationUnavailable(RuntimeError):
    """The model host could not be reached or returned nothing usable."""


def build_prompt(query: str, prior_results: list[PriorResult] | None = None) -> str:
    prompt = f'Based on the search query "{query}", recommend {RECOMMENDATION_COUNT} books that someone might be interested in reading. '

    if prior_results:
        found = ", ".join(f'"{r.title}" by {r.author}' for r in prior_results)
        prompt += f"The user has already found these books: {found}. "
        prompt += "Suggest different books that complement or relate to their interests. "

    prompt += f"""For each recommendation, provide:
1. Title
2. Author
3. Brief description (1-2 sentences)
4. Why it relates to their search
5. Genre/category

Format your response as a JSON array with objects containing: title, author, description, reason, genre.

Example format:
[
  {{
    "title": "Book Title",
    "author": "Author Name",
    "description": "Brief description of the book",
    "reason": "Why this relates to the search query",
    "genre": "Fiction/Non-fiction/etc"
  }}
]

Please provide exactly {RECOMMENDATION_COUNT} recommendations in valid JSON format."""
    return prompt


# --- Reply parsing ---
# Each strategy returns a list or None and must not raise.

def first_array_literal(text: str) -> list | None:
    """The first '[' that decodes as a JSON array holding at least one object, ignoring prose around it."""
    decoder = json.JSONDecoder()
    start = text.find("[")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except ValueError:
            value = None
        if isinstance(value, list) and any(isinstance(item, dict) for item in value):
            return value
        start = text.find("[", start + 1)
    return None


def whole_document(text: str) -> list | None:
    try:
        value = json.loads(text)
    except ValueError:
        return None
    return value if isinstance(value, list) else None


PARSE_STRATEGIES = (first_array_literal, whole_document)


def fallback_recommendations() -> list[RecommendationRecord]:
    return [RecommendationRecord(**r) for r in FALLBACK_RECOMMENDATIONS]


def coerce_recommendations(items: list) -> list[RecommendationRecord]:
    """Records from parsed JSON; entries that aren't objects with a title are dropped."""
    records = []
    for item in items:
        if not isinstance(item, dict):
            continue
        fields = {k: "" if item.get(k) is None else str(item.get(k)).strip() for k in RecommendationRecord.model_fields}
        if not fields["title"]:
            continue
        records.append(RecommendationRecord(**fields))
    return records


def enforce_count(records: list[RecommendationRecord]) -> list[RecommendationRecord]:
    """Truncate to RECOMMENDATION_COUNT, or top up from the fallback set without repeating titles."""
    records = records[:RECOMMENDATION_COUNT]
    seen = {r.title.lower() for r in records}
    for extra in fallback_recommendations():
        if len(records) >= RECOMMENDATION_COUNT:
            break
        if extra.title.lower() not in seen:
            records.append(extra)
            seen.add(extra.title.lower())
    return records


def parse_recommendations(text: str) -> list[RecommendationRecord]:
    for strategy in PARSE_STRATEGIES:
        items = strategy(text)
        if items is None:
            continue
        records = coerce_recommendations(items)
        if records:
            return records
    logger.warning("[Recommend] could not parse model reply, using fallback recommendations")
    return fallback_recommendations()


class RecommendationService:
    """Book suggestions from Claude for a search query."""

    def __init__(self, api_key: str | None, model: str, max_tokens: int = 1000, client=None):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def client(self):
        if self._client is None:
            if not self.api_key:
                raise RecommendationConfigError("Anthropic API key not configured")
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def recommend(self, query: str, prior_results: list[PriorResult] | None = None) -> list[RecommendationRecord]:
        client = self.client()
        prompt = build_prompt(query, prior_results)
        logger.info(f"[Recommend] requesting recommendations for '{query}'")

        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise RecommendationUnavailable(str(e)) from e

        text = "".join(getattr(block, "text", "") for block in (response.content or []))
        return enforce_count(parse_recommendations(text))
