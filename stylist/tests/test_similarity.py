from __future__ import annotations

from unittest.mock import MagicMock

import numpy as np
import pytest

from stylist.embeddings.cache import EmbeddingCache
from stylist.embeddings.similarity import SimilarityEngine, cosine_similarity


class TestCosineSimilarity:
    def test_self_similarity_is_one(self):
        v = [0.3, -1.2, 4.0]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_symmetric(self):
        a, b = [1.0, 2.0, 3.0], [-2.0, 0.5, 1.0]
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_orthogonal_and_opposite(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
        assert cosine_similarity([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(-1.0)

    def test_magnitude_independent(self):
        assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0)

    def test_defensive_zero_cases(self):
        assert cosine_similarity(None, [1.0]) == 0.0
        assert cosine_similarity([1.0], None) == 0.0
        assert cosine_similarity([], []) == 0.0
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0

    def test_returns_python_float(self):
        assert isinstance(cosine_similarity(np.array([1.0, 2.0]), np.array([2.0, 1.0])), float)


class TestSimilarityEngine:
    def test_embed_returns_vector(self):
        engine = SimilarityEngine(lambda text: [1.0, 2.0])
        vec = engine.embed("linen shirt")
        assert isinstance(vec, np.ndarray)
        assert vec.dtype == np.float64
        assert vec.tolist() == [1.0, 2.0]

    def test_provider_error_is_soft_failure(self):
        provider = MagicMock(side_effect=RuntimeError("provider down"))
        engine = SimilarityEngine(provider)
        assert engine.embed("anything") is None

    @pytest.mark.parametrize("bad", [None, [], "not a vector", [[1.0, 2.0]], [1.0, float("nan")], {"values": [1]}])
    def test_malformed_response_is_soft_failure(self, bad):
        engine = SimilarityEngine(lambda text: bad)
        assert engine.embed("anything") is None

    def test_score_with_failed_item_embedding_is_zero(self):
        engine = SimilarityEngine(MagicMock(side_effect=TimeoutError()))
        assert engine.score(np.array([1.0, 0.0]), "item text") == 0.0

    def test_cache_avoids_second_provider_call(self):
        provider = MagicMock(return_value=[0.5, 0.5])
        cache = EmbeddingCache(ttl=60)
        engine = SimilarityEngine(provider, cache=cache)
        engine.embed("same text")
        engine.embed("same text")
        assert provider.call_count == 1
        assert cache.stats()["hits"] == 1

    def test_failures_are_not_cached(self):
        provider = MagicMock(side_effect=[RuntimeError("blip"), [1.0, 0.0]])
        cache = EmbeddingCache(ttl=60)
        engine = SimilarityEngine(provider, cache=cache)
        assert engine.embed("text") is None
        assert engine.embed("text").tolist() == [1.0, 0.0]
        assert provider.call_count == 2

    def test_cache_is_namespaced_by_model(self):
        cache = EmbeddingCache(ttl=60)
        mini = SimilarityEngine(MagicMock(return_value=[1.0, 0.0]), cache=cache, namespace="mini")
        large = SimilarityEngine(MagicMock(return_value=[0.0, 1.0, 0.0]), cache=cache, namespace="large")

        assert mini.embed("linen shirt").tolist() == [1.0, 0.0]
        assert large.embed("linen shirt").tolist() == [0.0, 1.0, 0.0]
        assert large.provider.call_count == 1

    def test_unmemoized_embed_bypasses_cache(self):
        provider = MagicMock(return_value=[0.5, 0.5])
        cache = EmbeddingCache(ttl=60)
        engine = SimilarityEngine(provider, cache=cache)
        engine.embed("query", memoize=False)
        engine.embed("query", memoize=False)
        assert provider.call_count == 2
        assert cache.stats()["size"] == 0
