from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from ..analytics.store import record_event
from ..embeddings.cache import DEFAULT_EMBEDDING_CACHE, EmbeddingCache
from ..embeddings.config import DEFAULT_EMBEDDING_CONFIG, EmbeddingConfig
from ..embeddings.encoder import encode_text
from ..embeddings.similarity import SimilarityEngine
from ..llm.groq_client import generate_outfit_text
from ..llm.parsing import parse_ai_response
from ..llm.prompts import build_stylist_prompt
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .filtering import filter_catalog
from .history import DEFAULT_HISTORY_STORE, HistoryStore, record_recommendation
from .models import CatalogItem, Preferences, RecommendationResponse
from .ranking import rank_candidates
from .selection import resolve_selection

logger = logging.getLogger(__name__)

NO_MATCHES_ERROR = "No products found within your budget. Try increasing your budget."


@dataclass(frozen=True)
class Collaborators:
    """External AI capabilities used by a single request."""

    embed: Callable[[str], Any]
    generate: Callable[[str], str]


def default_collaborators() -> Collaborators:
    return Collaborators(embed=encode_text, generate=generate_outfit_text)


def _record_search(preferences: Preferences, start_time: float, **data: Any) -> None:
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("recommendation", {
        "budget_tier": preferences.budget_tier.value,
        "style": preferences.style,
        "occasion": preferences.occasion,
        "weather": preferences.weather,
        "response_time_ms": elapsed_ms,
        **data,
    })


def get_recommendations(
    preferences: Preferences,
    catalog: Sequence[CatalogItem],
    shop_id: str,
    collaborators: Collaborators,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
    embedding_config: EmbeddingConfig = DEFAULT_EMBEDDING_CONFIG,
    history: HistoryStore = DEFAULT_HISTORY_STORE,
    cache: EmbeddingCache | None = DEFAULT_EMBEDDING_CACHE,
) -> RecommendationResponse:
    start_time = time.time()

    # --- Budget and availability filter ---
    admissible = filter_catalog(catalog, preferences.budget_tier, config)
    if not admissible:
        _record_search(
            preferences, start_time,
            total_candidates=0, results_returned=0, semantic=False, match_tier=None,
        )
        return RecommendationResponse(preferences=preferences, error=NO_MATCHES_ERROR)

    # --- Semantic ranking ---
    engine = SimilarityEngine(collaborators.embed, cache=cache, namespace=embedding_config.model_name)
    ranked = rank_candidates(admissible, preferences, engine, embedding_config.max_workers)
    semantic = any(c.similarity_score is not None for c in ranked)

    # --- AI stylist ---
    prompt = build_stylist_prompt(preferences, ranked, limit=config.prompt_candidate_limit)
    try:
        raw_text = collaborators.generate(prompt)
    except Exception:
        logger.warning("Text generation failed, falling back to ranked products", exc_info=True)
        raw_text = ""
    pick = parse_ai_response(raw_text)
    logger.info("Parsed AI response via %s stage with %d titles", pick.source.value, len(pick.titles))

    # --- Selection cascade ---
    tier, products = resolve_selection(pick, ranked, preferences, config)

    record_recommendation(history, shop_id, preferences, pick.narrative, [p.id for p in products])

    _record_search(
        preferences, start_time,
        total_candidates=len(admissible),
        results_returned=len(products),
        semantic=semantic,
        match_tier=tier,
        pick_source=pick.source.value,
    )

    return RecommendationResponse(
        preferences=preferences,
        recommendation=pick.narrative or None,
        color_palette=pick.color_palette,
        products=products,
        total_candidates=len(admissible),
        match_tier=tier,
    )
