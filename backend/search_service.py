"""Catalogue search: live Symphony lookup with a scored static fallback."""

import logging
import random
from dataclasses import dataclass, field

from catalog_data import FALLBACK_BOOKS, FALLBACK_SOURCE, LIVE_SOURCE, POPULAR_COUNT, POPULAR_NOTE, catalog_url, hold_url
from models import AvailabilityInfo, BookRecord, BranchHolding
from normalize import MULTIPLE_LOCATIONS, normalize_response
from scoring import CATALOGUE_LIMIT, rank
from symphony import CatalogueUnavailable, SymphonyClient

logger = logging.getLogger(__name__)

# (available, total, likelihood)
DEMO_AVAILABILITY = [
    (3, 5, 0.4),
    (0, 3, 0.3),
    (1, 1, 0.2),
    (0, 1, 0.1),
]


@dataclass
class SearchOutcome:
    results: list[BookRecord] = field(default_factory=list)
    source: str = FALLBACK_SOURCE
    api_status: str = "fallback"
    fallback_reason: str | None = None


def demo_availability(rng: random.Random, branch: str | None = None) -> AvailabilityInfo:
    """Plausible holdings for a fallback record, drawn from the given RNG."""
    available, total, _ = rng.choices(DEMO_AVAILABILITY, weights=[s[2] for s in DEMO_AVAILABILITY])[0]
    if available > 0:
        message = f"{available} of {total} copies available"
    else:
        message = f"All {total} copies checked out. Place a hold?"
    return AvailabilityInfo(
        status="available" if available > 0 else "on_hold",
        total_copies=total,
        available_copies=available,
        message=message,
        branch_holdings=[BranchHolding(
            branch=branch or "Central Library",
            total_copies=total,
            available_copies=available,
            status="available" if available > 0 else "checked_out",
        )],
    )


def fallback_record(book: dict, branch: str | None, rng: random.Random, score: int | None = None, note: str | None = None) -> BookRecord:
    isbn = book.get("isbn")
    return BookRecord(
        id=f"mock_{isbn}" if isbn else f"mock_{rng.getrandbits(32):x}",
        title=book["title"],
        author=book["author"],
        isbn=isbn,
        publish_year=book.get("year"),
        call_number=book.get("call_number"),
        format=book.get("format", "Book"),
        description=book.get("description", ""),
        availability=demo_availability(rng, branch),
        branch=branch or MULTIPLE_LOCATIONS,
        hold_url=hold_url(None, book["title"]),
        catalog_url=catalog_url(book["title"]),
        source=FALLBACK_SOURCE,
        relevance_score=score,
        note=note,
    )


def fallback_search(query: str, branch: str | None, rng: random.Random, books: list[dict] = FALLBACK_BOOKS) -> list[BookRecord]:
    """Score the static catalogue; an empty match becomes the popular list."""
    matches = rank(query, books, limit=CATALOGUE_LIMIT, include_description=True)
    if not matches:
        logger.info(f"[Search] no fallback matches for '{query}', returning popular titles")
        return [fallback_record(b, branch, rng, score=1, note=POPULAR_NOTE) for b in books[:POPULAR_COUNT]]
    return [fallback_record(c.entry, branch, rng, score=c.score) for c in matches]


class CatalogueSearchService:
    def __init__(self, client: SymphonyClient, use_live: bool = True, seed: int | None = None, books: list[dict] | None = None):
        self.client = client
        self.use_live = use_live
        self.seed = seed
        self.books = books if books is not None else FALLBACK_BOOKS

    def _rng(self) -> random.Random:
        # Fresh generator per request; a fixed seed repeats the same draws.
        return random.Random(self.seed)

    async def search(self, query: str, branch: str | None = None) -> SearchOutcome:
        reason = "live catalogue disabled"
        if self.use_live:
            try:
                payload = await self.client.search(query, branch)
                records = normalize_response(payload, branch)
                logger.info(f"[Search] Symphony returned {len(records)} records for '{query}'")
                return SearchOutcome(results=records, source=LIVE_SOURCE, api_status="success")
            except CatalogueUnavailable as e:
                reason = f"TPL Symphony API unavailable: {e}"
                logger.warning(f"[Search] {reason}")
            except Exception as e:
                reason = f"Failed to process Symphony response: {e}"
                logger.exception(f"[Search] {reason}")

        records = fallback_search(query, branch, self._rng(), self.books)
        return SearchOutcome(results=records, source=FALLBACK_SOURCE, api_status="fallback", fallback_reason=reason)
