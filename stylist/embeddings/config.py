from __future__ import annotations

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class EmbeddingConfig:
    model_name: str = os.getenv("EMBED_MODEL", "all-MiniLM-L6-v2")
    max_workers: int = _env_int("EMBED_MAX_WORKERS", 4)
    cache_ttl: int = _env_int("EMBED_CACHE_TTL", 3600)


DEFAULT_EMBEDDING_CONFIG = EmbeddingConfig()
