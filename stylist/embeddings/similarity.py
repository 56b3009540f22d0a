from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as _pairwise_cosine

from .cache import EmbeddingCache

logger = logging.getLogger(__name__)

EmbeddingProvider = Callable[[str], Any]


def _as_vector(raw: Any) -> np.ndarray | None:
    if raw is None:
        return None
    try:
        vector = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError):
        return None
    if vector.ndim != 1 or vector.size == 0 or not np.all(np.isfinite(vector)):
        return None
    return vector


def cosine_similarity(
    a: Sequence[float] | np.ndarray | None,
    b: Sequence[float] | np.ndarray | None,
) -> float:
    """Cosine similarity in [-1, 1].

    Returns 0.0 when either vector is absent, empty, of mismatched length or
    has a zero norm.
    """
    vec_a = _as_vector(a)
    vec_b = _as_vector(b)
    if vec_a is None or vec_b is None or vec_a.shape != vec_b.shape:
        return 0.0
    if not np.any(vec_a) or not np.any(vec_b):
        return 0.0
    return float(_pairwise_cosine(vec_a.reshape(1, -1), vec_b.reshape(1, -1))[0, 0])


class SimilarityEngine:
    """Wraps an embedding provider with soft-failure semantics.

    ``embed`` returns ``None`` instead of raising whenever the provider fails
    or hands back something that is not a usable vector. Cached vectors are
    namespaced so that vectors from different models never mix.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        cache: EmbeddingCache | None = None,
        namespace: str = "",
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.namespace = namespace

    def embed(self, text: str, memoize: bool = True) -> np.ndarray | None:
        use_cache = memoize and self.cache is not None
        if use_cache:
            cached = self.cache.get(text, self.namespace)
            if cached is not None:
                return cached

        try:
            raw = self.provider(text)
        except Exception:
            logger.warning("Embedding provider failed, similarity unknown", exc_info=True)
            return None

        vector = _as_vector(raw)
        if vector is None:
            logger.warning("Embedding provider returned a malformed vector")
            return None

        if use_cache:
            self.cache.set(text, vector, self.namespace)
        return vector

    def score(self, query_vector: np.ndarray | None, text: str) -> float:
        return cosine_similarity(query_vector, self.embed(text))
