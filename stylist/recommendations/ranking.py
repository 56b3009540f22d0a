from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from ..embeddings.config import DEFAULT_EMBEDDING_CONFIG
from ..embeddings.similarity import SimilarityEngine
from ..embeddings.text import build_product_text
from .models import CatalogItem, Preferences, ScoredCandidate

logger = logging.getLogger(__name__)


def build_preference_query(preferences: Preferences) -> str:
    return f"{preferences.style} {preferences.occasion} outfit for {preferences.weather} weather"


def _unscored(items: Sequence[CatalogItem]) -> list[ScoredCandidate]:
    return [ScoredCandidate(**item.model_dump(), similarity_score=None) for item in items]


def rank_candidates(
    admissible: Sequence[CatalogItem],
    preferences: Preferences,
    engine: SimilarityEngine,
    max_workers: int = DEFAULT_EMBEDDING_CONFIG.max_workers,
) -> list[ScoredCandidate]:
    """
    Order admissible items by semantic similarity to the shopper's preferences.

    If the query itself cannot be embedded the items come back unscored in
    filter order. Individual item failures score 0.0 and stay in the list.
    """
    if not admissible:
        return []

    # only catalog item projections are memoised
    query_vector = engine.embed(build_preference_query(preferences), memoize=False)
    if query_vector is None:
        logger.warning("Query embedding unavailable, keeping filter order")
        return _unscored(admissible)

    def _score(item: CatalogItem) -> ScoredCandidate:
        similarity = engine.score(query_vector, build_product_text(item))
        return ScoredCandidate(**item.model_dump(), similarity_score=similarity)

    with ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="embed-call") as pool:
        scored = list(pool.map(_score, admissible))

    # sorted() is stable, so equal scores keep filter order
    scored = sorted(scored, key=lambda c: c.similarity_score, reverse=True)

    logger.info(
        "Top semantic matches: %s",
        [(c.title, round(c.similarity_score, 4)) for c in scored[:5]],
    )
    return scored
