from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
import traceback
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path

from config import Settings
from catalog_data import BRANCHES
from models import SearchRequest, RecommendationRequest
from symphony import SymphonyClient
from search_service import CatalogueSearchService
from recommender import RecommendationService, RecommendationConfigError, RecommendationUnavailable
from discover import discover, search_payload, recommendations_payload

import logging

settings = Settings.from_env()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("api")

app = FastAPI(title="TPL Search API")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

WEB_DIR = Path(__file__).resolve().parent / "web"
app.mount("/static", StaticFiles(directory=str(WEB_DIR)), name="static")


# --- Services ---

@lru_cache
def get_search_service() -> CatalogueSearchService:
    client = SymphonyClient(settings.tpl_base_url, timeout=settings.tpl_timeout)
    return CatalogueSearchService(client, use_live=settings.tpl_live_search, seed=settings.fallback_seed)


@lru_cache
def get_recommendation_service() -> RecommendationService:
    return RecommendationService(
        api_key=settings.anthropic_api_key,
        model=settings.anthropic_model,
        max_tokens=settings.recommendation_max_tokens,
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require_query(query: str | None, detail: str) -> str:
    if not query or not query.strip():
        raise HTTPException(status_code=400, detail=detail)
    return query.strip()


# --- Endpoints ---

@app.get("/")
def home_page():
    return FileResponse(str(WEB_DIR / "index.html"))


@app.get("/health")
def health(recommender: RecommendationService = Depends(get_recommendation_service)):
    return {
        "status": "ok",
        "model_configured": recommender.configured,
        "live_catalogue": settings.tpl_live_search,
        "catalogue_url": settings.tpl_base_url,
    }


@app.get("/api/branches")
def list_branches():
    return {"branches": BRANCHES}


@app.post("/api/search")
async def search(req: SearchRequest, service: CatalogueSearchService = Depends(get_search_service)):
    query = _require_query(req.query, "Search query is required")
    branch = req.branch.strip() if req.branch and req.branch.strip() else None
    logger.info(f"[Search] query='{query}' branch={branch or 'any'}")

    outcome = await service.search(query, branch)
    return search_payload(outcome, query, branch, _now())


async def _recommend(service: RecommendationService, query: str, prior: list) -> dict:
    try:
        recommendations = await service.recommend(query, prior)
    except RecommendationConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except RecommendationUnavailable as e:
        raise HTTPException(status_code=502, detail=f"AI service error: {e}")
    return recommendations_payload(recommendations, query)


@app.post("/api/recommendations")
async def recommendations(req: RecommendationRequest, service: RecommendationService = Depends(get_recommendation_service)):
    query = _require_query(req.query, "Query is required for recommendations")
    return await _recommend(service, query, req.search_results)


@app.get("/api/recommendations")
async def recommendations_for_query(q: str = "", service: RecommendationService = Depends(get_recommendation_service)):
    query = _require_query(q, 'Query parameter "q" is required')
    return await _recommend(service, query, [])


@app.post("/api/discover")
async def discover_books(
    req: SearchRequest,
    search_service: CatalogueSearchService = Depends(get_search_service),
    recommendation_service: RecommendationService = Depends(get_recommendation_service),
):
    query = _require_query(req.query, "Search query is required")
    branch = req.branch.strip() if req.branch and req.branch.strip() else None
    return await discover(query, branch, search_service, recommendation_service, _now())
