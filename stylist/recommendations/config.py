from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RecommendationConfig:
    # Budget tier value -> price ceiling; None means no ceiling.
    budget_ceilings: dict[str, float | None] = field(
        default_factory=lambda: {"Under 50": 50.0, "50-100": 100.0, "100+": None}
    )
    budget_headroom: float = 1.25
    prompt_candidate_limit: int = 20
    fallback_count: int = 3
    max_recommendations: int = 5


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
