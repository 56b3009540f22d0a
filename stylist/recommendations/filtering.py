from __future__ import annotations

import math
from typing import Iterable

from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .models import BudgetTier, CatalogItem


def budget_ceiling(
    tier: BudgetTier | str,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> float | None:
    """Return the price ceiling for *tier*, or ``None`` when unbounded."""
    value = tier.value if isinstance(tier, BudgetTier) else str(tier)
    return config.budget_ceilings.get(value)


def allowed_max_price(
    tier: BudgetTier | str,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> float:
    ceiling = budget_ceiling(tier, config)
    if ceiling is None:
        return math.inf
    return ceiling * config.budget_headroom


def _is_admissible(item: CatalogItem, max_price: float) -> bool:
    if item.inventory_count is None or item.inventory_count <= 0:
        return False
    price = item.price
    if price is None or not math.isfinite(price) or price < 0:
        return False
    return price <= max_price


def filter_catalog(
    items: Iterable[CatalogItem],
    budget_tier: BudgetTier | str,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[CatalogItem]:
    """Keep in-stock items priced within the tier's ceiling plus headroom.

    Catalog order is preserved and the input is never mutated. Items with a
    missing price or inventory count are treated as inadmissible.
    """
    max_price = allowed_max_price(budget_tier, config)
    return [item for item in items if _is_admissible(item, max_price)]
