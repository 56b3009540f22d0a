from __future__ import annotations

import threading
import time

from stylist.embeddings.similarity import SimilarityEngine
from stylist.recommendations.models import CatalogItem, Preferences
from stylist.recommendations.ranking import build_preference_query, rank_candidates

PREFS = Preferences(style="Casual", occasion="Daily", weather="Hot")
QUERY = "Casual Daily outfit for Hot weather"


def _item(item_id: str, title: str) -> CatalogItem:
    return CatalogItem(id=item_id, title=title, price=10.0, inventory_count=3)


def _provider(vectors: dict[str, list[float]]):
    """Embed by looking up the first word of the text; unknown words fail."""

    def embed(text: str):
        if text == QUERY:
            return [1.0, 0.0]
        key = text.split()[0]
        if key not in vectors:
            raise RuntimeError(f"no embedding for {key}")
        return vectors[key]

    return embed


def test_build_preference_query():
    assert build_preference_query(PREFS) == QUERY


def test_sorted_descending_by_similarity():
    items = [_item("1", "Low"), _item("2", "High"), _item("3", "Mid")]
    engine = SimilarityEngine(_provider({"Low": [0.0, 1.0], "High": [1.0, 0.0], "Mid": [1.0, 1.0]}))

    ranked = rank_candidates(items, PREFS, engine, max_workers=2)

    assert [c.id for c in ranked] == ["2", "3", "1"]
    scores = [c.similarity_score for c in ranked]
    assert scores == sorted(scores, reverse=True)


def test_ties_keep_filter_order():
    items = [_item("a", "Same one"), _item("b", "Other"), _item("c", "Same two")]
    engine = SimilarityEngine(_provider({"Same": [1.0, 0.0], "Other": [0.0, 1.0]}))

    ranked = rank_candidates(items, PREFS, engine)

    assert [c.id for c in ranked] == ["a", "c", "b"]


def test_query_embedding_failure_keeps_filter_order_unscored():
    items = [_item("3", "Gamma"), _item("1", "Alpha"), _item("2", "Beta")]

    def broken(text: str):
        raise ConnectionError("embedding service unavailable")

    ranked = rank_candidates(items, PREFS, SimilarityEngine(broken))

    assert [c.id for c in ranked] == ["3", "1", "2"]
    assert all(c.similarity_score is None for c in ranked)


def test_item_embedding_failure_scores_zero_and_stays():
    items = [_item("1", "Missing"), _item("2", "Known")]
    engine = SimilarityEngine(_provider({"Known": [1.0, 0.0]}))

    ranked = rank_candidates(items, PREFS, engine)

    assert [c.id for c in ranked] == ["2", "1"]
    assert ranked[1].similarity_score == 0.0


def test_empty_input():
    assert rank_candidates([], PREFS, SimilarityEngine(lambda t: [1.0])) == []


def test_fan_out_never_exceeds_max_workers():
    lock = threading.Lock()
    in_flight = 0
    peak = 0

    def slow_embed(text: str):
        nonlocal in_flight, peak
        with lock:
            in_flight += 1
            peak = max(peak, in_flight)
        time.sleep(0.02)
        with lock:
            in_flight -= 1
        return [1.0, 0.0]

    items = [_item(str(i), f"Item {i}") for i in range(10)]

    ranked = rank_candidates(items, PREFS, SimilarityEngine(slow_embed), max_workers=2)

    assert len(ranked) == 10
    assert 1 <= peak <= 2
