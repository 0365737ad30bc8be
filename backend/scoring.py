"""Keyword relevance scoring over the embedded catalogue."""

from dataclasses import dataclass

TITLE_EXACT = 20
TITLE_MATCH = 10
AUTHOR_MATCH = 8
SUBJECT_MATCH = 5
TEXT_MATCH = 2

CATALOGUE_LIMIT = 8


@dataclass(frozen=True)
class ScoredCandidate:
    entry: dict
    score: int
    position: int


def tokenize(query: str, min_length: int = 2) -> list[str]:
    """Lowercase whitespace tokens, dropping anything shorter than min_length."""
    return [t for t in query.lower().split() if len(t) >= min_length]


def score_entry(query: str, tokens: list[str], entry: dict, include_description: bool = False) -> int:
    title = entry.get("title", "").lower()
    author = entry.get("author", "").lower()
    subjects = [s.lower() for s in entry.get("subjects", [])]
    parts = [title, author, " ".join(subjects)]
    if include_description:
        parts.append(entry.get("description", "").lower())
    searchable = " ".join(parts)
    exact_title = title == query.strip().lower()

    score = 0
    for token in tokens:
        if exact_title:
            score += TITLE_EXACT
        elif token in title:
            score += TITLE_MATCH
        if token in author:
            score += AUTHOR_MATCH
        if any(token in s for s in subjects):
            score += SUBJECT_MATCH
        if token in searchable:
            score += TEXT_MATCH
    return score


def rank(query: str, entries: list[dict], limit: int = CATALOGUE_LIMIT, include_description: bool = False) -> list[ScoredCandidate]:
    """Top `limit` entries with a non-zero score, best first.

    Ties keep catalogue order. Returns [] when nothing matches; callers decide
    what to show instead.
    """
    tokens = tokenize(query, min_length=3 if include_description else 2)
    if not tokens:
        return []
    scored = []
    for position, entry in enumerate(entries):
        score = score_entry(query, tokens, entry, include_description)
        if score > 0:
            scored.append(ScoredCandidate(entry=entry, score=score, position=position))
    scored.sort(key=lambda c: c.score, reverse=True)
    return scored[:limit]
