from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog.json"


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name, "").strip()
    return Path(raw) if raw else None


@dataclass(frozen=True)
class CatalogConfig:
    """
    Configuration for the catalog source and the recommendation history log.
    """

    catalog_path: Path = _env_path("CATALOG_PATH") or _DEFAULT_CATALOG
    history_path: Path | None = _env_path("HISTORY_PATH")
    max_products: int = 250


DEFAULT_CATALOG_CONFIG = CatalogConfig()
