"""Run catalogue search and recommendations side by side for the results page."""

import asyncio
import logging

from recommender import RecommendationConfigError, RecommendationService
from search_service import CatalogueSearchService, SearchOutcome

logger = logging.getLogger(__name__)


def search_payload(outcome: SearchOutcome, query: str, branch: str | None, timestamp: str) -> dict:
    payload = {
        "results": [r.to_json() for r in outcome.results],
        "total": len(outcome.results),
        "query": query,
        "branch": branch,
        "timestamp": timestamp,
        "source": outcome.source,
        "api_status": outcome.api_status,
    }
    if outcome.fallback_reason:
        payload["fallback_reason"] = outcome.fallback_reason
    return payload


def recommendations_payload(recommendations: list, query: str) -> dict:
    return {
        "recommendations": [r.model_dump() for r in recommendations],
        "query": query,
        "totalRecommendations": len(recommendations),
    }


def _error_message(exc: BaseException) -> str:
    if isinstance(exc, RecommendationConfigError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


async def discover(
    query: str,
    branch: str | None,
    search_service: CatalogueSearchService,
    recommendation_service: RecommendationService,
    timestamp: str,
) -> dict:
    """Both halves run concurrently; a failure in one never drops the other."""
    search_result, rec_result = await asyncio.gather(
        search_service.search(query, branch),
        recommendation_service.recommend(query),
        return_exceptions=True,
    )

    response: dict = {"query": query, "branch": branch, "search": None, "recommendations": None, "errors": {}}

    if isinstance(search_result, BaseException):
        logger.error(f"[Discover] search failed for '{query}': {search_result}")
        response["errors"]["search"] = _error_message(search_result)
    else:
        response["search"] = search_payload(search_result, query, branch, timestamp)

    if isinstance(rec_result, BaseException):
        logger.warning(f"[Discover] recommendations failed for '{query}': {rec_result}")
        response["errors"]["recommendations"] = _error_message(rec_result)
    else:
        response["recommendations"] = recommendations_payload(rec_result, query)

    return response
