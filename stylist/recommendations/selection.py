from __future__ import annotations

import logging
from typing import Sequence

from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .models import AiPick, Preferences, ScoredCandidate

logger = logging.getLogger(__name__)

TIER_EXACT = "exact"
TIER_SUBSTRING = "substring"
TIER_SEMANTIC = "semantic"
TIER_KEYWORD = "keyword"
TIER_NONE = "none"


def _normalized_titles(pick: AiPick) -> list[str]:
    return [t.strip().casefold() for t in pick.titles if t and t.strip()]


def _exact_matches(titles: list[str], candidates: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    matches: dict[str, ScoredCandidate] = {}
    for title in titles:
        match = next((c for c in candidates if c.title.casefold() == title), None)
        if match is not None and match.id not in matches:
            matches[match.id] = match
    return list(matches.values())


def _substring_matches(titles: list[str], candidates: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    matches: dict[str, ScoredCandidate] = {}
    for title in titles:
        for c in candidates:
            candidate_title = c.title.casefold()
            if not candidate_title:
                continue
            if title in candidate_title or candidate_title in title:
                matches.setdefault(c.id, c)
    return list(matches.values())


def _keyword_matches(
    candidates: Sequence[ScoredCandidate],
    preferences: Preferences,
    count: int,
) -> list[ScoredCandidate]:
    keywords = [
        k.strip().casefold()
        for k in (preferences.style, preferences.occasion, preferences.weather)
        if k and k.strip()
    ]

    def _overlap(c: ScoredCandidate) -> int:
        tags = [t.casefold() for t in c.tags]
        return sum(1 for kw in keywords if any(kw in t for t in tags))

    ranked = sorted(candidates, key=lambda c: (-_overlap(c), c.price if c.price is not None else 0.0))
    return ranked[:count]


def _dedupe(products: Sequence[ScoredCandidate], limit: int) -> list[ScoredCandidate]:
    seen: set[str] = set()
    unique: list[ScoredCandidate] = []
    for p in products:
        if p.id in seen:
            continue
        seen.add(p.id)
        unique.append(p)
        if len(unique) >= limit:
            break
    return unique


def resolve_selection(
    pick: AiPick,
    candidates: Sequence[ScoredCandidate],
    preferences: Preferences,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> tuple[str, list[ScoredCandidate]]:
    """
    Resolve the model's picked titles against the ranked candidates.

    Tiers are tried in order and the first one with at least one match wins:
    exact title, substring title, top candidates by similarity, and finally
    preference keyword overlap with the candidate tags. Returns the winning
    tier name with the deduplicated, capped product list.
    """
    if not candidates:
        return TIER_NONE, []

    titles = _normalized_titles(pick)

    tier, products = TIER_EXACT, _exact_matches(titles, candidates)
    if not products and titles:
        tier, products = TIER_SUBSTRING, _substring_matches(titles, candidates)

    if not products:
        if any(c.similarity_score is not None for c in candidates):
            tier, products = TIER_SEMANTIC, list(candidates[: config.fallback_count])
        else:
            tier, products = TIER_KEYWORD, _keyword_matches(candidates, preferences, config.fallback_count)

    if tier in (TIER_SEMANTIC, TIER_KEYWORD):
        logger.info("No title matches from %d AI titles, using %s fallback", len(titles), tier)

    return tier, _dedupe(products, config.max_recommendations)


def select_products(
    pick: AiPick,
    candidates: Sequence[ScoredCandidate],
    preferences: Preferences,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[ScoredCandidate]:
    return resolve_selection(pick, candidates, preferences, config)[1]
