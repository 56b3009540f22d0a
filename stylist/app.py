from __future__ import annotations

import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import require_admin, require_shop, require_user
from .auth.users import authenticate
from .catalog.source import get_catalog
from .embeddings.cache import get_cache_stats
from .recommendations.history import DEFAULT_HISTORY_STORE
from .recommendations.models import (
    BudgetTier,
    CatalogSummaryItem,
    LoginRequest,
    Preferences,
    RecommendationRecord,
    RecommendationResponse,
)
from .recommendations.pipeline import default_collaborators, get_recommendations

app = FastAPI(title="Outfit Stylist API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "outfit-stylist-secret-change-in-production"),
)

_FORM_OPTIONS = {
    "budget_tiers": [tier.value for tier in BudgetTier],
    "sizes": ["S", "M", "L", "XL"],
    "styles": ["Casual", "Formal", "Athleisure"],
    "occasions": ["Work", "Party", "Travel", "Daily"],
    "weather": ["Hot", "Cold", "Rainy", "Mild"],
}


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return _FORM_OPTIONS


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


# ── Merchant endpoints ───────────────────────────────────────────────────


@app.get("/catalog", response_model=list[CatalogSummaryItem])
def catalog(shop: str = Depends(require_shop)) -> list[CatalogSummaryItem]:
    return [
        CatalogSummaryItem(
            id=item.id,
            title=item.title,
            tags=item.tags,
            price=item.price,
            inventory=item.inventory_count,
        )
        for item in get_catalog()
        if item.inventory_count is not None and item.inventory_count > 0
    ]


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(
    body: Preferences,
    shop: str = Depends(require_shop),
) -> RecommendationResponse:
    return get_recommendations(
        body,
        get_catalog(),
        shop,
        default_collaborators(),
        history=DEFAULT_HISTORY_STORE,
    )


@app.get("/history", response_model=list[RecommendationRecord])
def history(
    limit: int = Query(default=5, ge=1, le=50),
    shop: str = Depends(require_shop),
) -> list[RecommendationRecord]:
    return DEFAULT_HISTORY_STORE.recent(shop, limit)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
