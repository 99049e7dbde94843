from __future__ import annotations

import logging
import math
import os
import time

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_request
from .auth.dependencies import require_admin, require_user, require_user_id
from .auth.users import authenticate
from .recommendations.config import DEFAULT_ENGINE_CONFIG
from .recommendations.data_store import get_store
from .recommendations.models import (
    LoginRequest,
    RecommendationMeta,
    RecommendationMode,
    RecommendationsResponse,
    SimilarUsersMeta,
    SimilarUsersResponse,
    TasteProfile,
)
from .recommendations.service import RecommendationService
from .recommendations.store import StoreError

logger = logging.getLogger(__name__)

app = FastAPI(title="Oyster Recommendation API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "oyster-recs-secret-change-in-production"),
)


def get_recommendation_service() -> RecommendationService:
    return RecommendationService(get_store())


def _parse_limit(raw: str | None) -> int:
    """Numeric text is truncated to an int; anything else falls back to the default.

    The service clamps the result into range.
    """
    if raw is None:
        return DEFAULT_ENGINE_CONFIG.default_limit
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_ENGINE_CONFIG.default_limit
    if not math.isfinite(value):
        return DEFAULT_ENGINE_CONFIG.default_limit
    return int(value)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store failure while serving %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "error": "Server error"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Recommendation endpoints ─────────────────────────────────────────────


def _recommend(
    service: RecommendationService,
    user_id: str,
    mode: RecommendationMode,
    limit: str | None,
    endpoint: str,
) -> RecommendationsResponse:
    start_time = time.time()
    batch = service.get_recommendations(user_id, mode, _parse_limit(limit))
    record_request(
        endpoint,
        user_id,
        results_returned=len(batch.results),
        response_time_ms=round((time.time() - start_time) * 1000, 1),
        reason=batch.reason,
    )
    return RecommendationsResponse(
        data=batch.results,
        meta=RecommendationMeta(
            count=len(batch.results),
            has_recommendations=bool(batch.results),
            type=batch.mode,
            reason=batch.reason,
        ),
    )


@app.get("/recommendations", response_model=RecommendationsResponse)
def attribute_recommendations(
    limit: str | None = Query(default=None),
    user_id: str = Depends(require_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationsResponse:
    return _recommend(service, user_id, RecommendationMode.attribute, limit, "attribute")


@app.get("/recommendations/collaborative", response_model=RecommendationsResponse)
def collaborative_recommendations(
    limit: str | None = Query(default=None),
    user_id: str = Depends(require_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationsResponse:
    return _recommend(service, user_id, RecommendationMode.collaborative, limit, "collaborative")


@app.get("/recommendations/hybrid", response_model=RecommendationsResponse)
def hybrid_recommendations(
    limit: str | None = Query(default=None),
    user_id: str = Depends(require_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationsResponse:
    return _recommend(service, user_id, RecommendationMode.hybrid, limit, "hybrid")


@app.get("/recommendations/similar-users", response_model=SimilarUsersResponse)
def similar_users(
    limit: str | None = Query(default=None),
    user_id: str = Depends(require_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> SimilarUsersResponse:
    start_time = time.time()
    batch = service.get_similar_users(user_id, _parse_limit(limit))
    record_request(
        "similar_users",
        user_id,
        results_returned=len(batch.results),
        response_time_ms=round((time.time() - start_time) * 1000, 1),
        reason=batch.reason,
    )
    return SimilarUsersResponse(
        data=batch.results,
        meta=SimilarUsersMeta(count=len(batch.results), reason=batch.reason),
    )


@app.get("/recommendations/profile", response_model=TasteProfile | None)
def taste_profile(
    user_id: str = Depends(require_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> TasteProfile | None:
    return service.get_taste_profile(user_id)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())
