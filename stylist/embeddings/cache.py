from __future__ import annotations

import hashlib
import threading
import time
from typing import Any

import numpy as np

from .config import DEFAULT_EMBEDDING_CONFIG


def _make_key(text: str, namespace: str = "") -> str:
    return hashlib.sha256(f"{namespace}\x00{text}".encode("utf-8")).hexdigest()[:16]


class EmbeddingCache:
    """TTL memo of embedding vectors keyed by model namespace and embedded text."""

    def __init__(self, ttl: float = DEFAULT_EMBEDDING_CONFIG.cache_ttl) -> None:
        self.ttl = ttl
        self._entries: dict[str, dict[str, Any]] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    def get(self, text: str, namespace: str = "") -> np.ndarray | None:
        key = _make_key(text, namespace)
        with self._lock:
            entry = self._entries.get(key)
            if entry and time.time() - entry["created_at"] < self.ttl:
                self._hits += 1
                return entry["value"]
            if entry:
                del self._entries[key]
            self._misses += 1
            return None

    def set(self, text: str, vector: np.ndarray, namespace: str = "") -> None:
        key = _make_key(text, namespace)
        with self._lock:
            self._entries[key] = {"value": vector, "created_at": time.time()}

    def stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0


DEFAULT_EMBEDDING_CACHE = EmbeddingCache()


def get_cache_stats() -> dict:
    return DEFAULT_EMBEDDING_CACHE.stats()


def clear_cache() -> None:
    DEFAULT_EMBEDDING_CACHE.clear()
