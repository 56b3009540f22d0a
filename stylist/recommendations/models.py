from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BudgetTier(str, Enum):
    UNDER_LOW = "Under 50"
    MID_RANGE = "50-100"
    UNBOUNDED = "100+"


class Preferences(BaseModel):
    budget_tier: BudgetTier = BudgetTier.MID_RANGE
    size: str = Field(default="M", max_length=20)
    style: str = Field(default="Casual", max_length=100)
    occasion: str = Field(default="Daily", max_length=100)
    weather: str = Field(default="Hot", max_length=100)


class ProductOption(BaseModel):
    name: str
    values: list[str] = Field(default_factory=list)


class CatalogItem(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""
    vendor: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    options: list[ProductOption] = Field(default_factory=list)
    price: float | None = None
    inventory_count: int | None = None
    image_url: str | None = None


class ScoredCandidate(CatalogItem):
    similarity_score: float | None = None


class PickSource(str, Enum):
    structured = "structured"
    partially_recovered = "partially_recovered"
    raw_text = "raw_text"


class AiPick(BaseModel):
    narrative: str = ""
    color_palette: list[str] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)
    source: PickSource = PickSource.raw_text


class RecommendationResponse(BaseModel):
    preferences: Preferences
    recommendation: str | None = None
    color_palette: list[str] = Field(default_factory=list)
    products: list[ScoredCandidate] = Field(default_factory=list)
    error: str | None = None
    total_candidates: int = 0
    match_tier: str | None = None


class RecommendationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    shop_id: str
    preferences_snapshot: str
    advice: str = ""
    product_ids: tuple[str, ...] = ()
    created_at: float = Field(default_factory=time.time)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class CatalogSummaryItem(BaseModel):
    id: str
    title: str
    tags: list[str]
    price: float | None
    inventory: int | None
