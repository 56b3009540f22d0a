from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..recommendations.models import CatalogItem, ProductOption
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig

logger = logging.getLogger(__name__)

_catalog: list[CatalogItem] | None = None


def load_raw_products(path: Path) -> list[dict[str, Any]]:
    """Read raw product records from a JSON export.

    Accepts either a plain list of product nodes or the storefront GraphQL
    envelope ``{"data": {"products": {"edges": [{"node": {...}}]}}}``.
    """
    with path.open(encoding="utf-8") as fh:
        payload = json.load(fh)

    if isinstance(payload, dict):
        # GraphQL errors come back with null data or products
        products = (payload.get("data") or {}).get("products") or {}
        edges = products.get("edges") or []
        return [edge["node"] for edge in edges if isinstance(edge, dict) and isinstance(edge.get("node"), dict)]
    if isinstance(payload, list):
        return [p for p in payload if isinstance(p, dict)]
    return []


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _finite(value: Any) -> float | None:
    if pd.isna(value) or not np.isfinite(value):
        return None
    return float(value)


def _text(value: Any) -> str:
    return "" if _is_missing(value) else str(value)


def _parse_tags(value: Any) -> list[str]:
    if isinstance(value, list):
        raw = [str(t) for t in value if not _is_missing(t)]
    elif isinstance(value, str):
        raw = value.split(",")
    else:
        return []
    return [t.strip() for t in raw if t.strip()]


def _parse_options(value: Any) -> list[ProductOption]:
    if not isinstance(value, list):
        return []
    options: list[ProductOption] = []
    for opt in value:
        if not isinstance(opt, dict) or not opt.get("name"):
            continue
        values = opt.get("values") or []
        options.append(ProductOption(
            name=str(opt["name"]),
            values=[str(v) for v in values] if isinstance(values, list) else [],
        ))
    return options


def normalize_products(raw: list[dict[str, Any]]) -> list[CatalogItem]:
    """
    Map raw product records into the canonical CatalogItem schema.

    Non-numeric, infinite or missing price and inventory values become ``None`` so the
    budget filter can reject them instead of crashing.
    """
    if not raw:
        return []

    df = pd.json_normalize(raw)

    # Storefront exports and hand-written fixtures name columns differently.
    def _first_present(columns: list[str]) -> str | None:
        for col in columns:
            if col in df.columns:
                return col
        return None

    def _column(columns: list[str]) -> pd.Series:
        col = _first_present(columns)
        return df[col] if col else pd.Series([None] * len(df), index=df.index, dtype=object)

    prices = pd.to_numeric(_column(["priceRangeV2.minVariantPrice.amount", "price"]), errors="coerce")
    inventory = pd.to_numeric(_column(["totalInventory", "inventory", "inventory_count"]), errors="coerce")
    descriptions = _column(["description"])
    descriptions_html = _column(["descriptionHtml"])
    ids = _column(["id"])
    titles = _column(["title"])
    vendors = _column(["vendor"])
    categories = _column(["productType", "category"])
    tags = _column(["tags"])
    options = _column(["options"])
    images = _column(["featuredImage.url", "image", "image_url"])

    items: list[CatalogItem] = []
    for idx in df.index:
        item_id = _text(ids[idx]).strip()
        if not item_id:
            logger.warning("Skipping catalog record without an id at position %s", idx)
            continue

        price = _finite(prices[idx])
        count = _finite(inventory[idx])
        image = _text(images[idx])

        items.append(CatalogItem(
            id=item_id,
            title=_text(titles[idx]),
            description=_text(descriptions[idx]) or _text(descriptions_html[idx]),
            vendor=_text(vendors[idx]),
            category=_text(categories[idx]),
            tags=_parse_tags(tags[idx]),
            options=_parse_options(options[idx]),
            price=price,
            inventory_count=None if count is None else int(count),
            image_url=image or None,
        ))

    return items


def get_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> list[CatalogItem]:
    """Return the normalized catalog, loading it on first call."""
    global _catalog
    if _catalog is None:
        raw = load_raw_products(config.catalog_path)[: config.max_products]
        _catalog = normalize_products(raw)
    return _catalog


def reset_catalog() -> None:
    global _catalog
    _catalog = None
