from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from stylist.analytics.store import clear_events, get_events
from stylist.recommendations.history import HistoryStore, record_recommendation, snapshot_preferences
from stylist.recommendations.models import BudgetTier, Preferences, RecommendationRecord

PREFS = Preferences(budget_tier=BudgetTier.UNDER_LOW, size="L", style="Formal", occasion="Work", weather="Cold")


def _record(shop: str, created_at: float, advice: str = "") -> RecommendationRecord:
    return RecommendationRecord(shop_id=shop, preferences_snapshot="{}", advice=advice, created_at=created_at)


def test_snapshot_includes_size():
    snap = json.loads(snapshot_preferences(PREFS))
    assert snap == {"budget": "Under 50", "size": "L", "style": "Formal", "occasion": "Work", "weather": "Cold"}


def test_recent_newest_first_and_scoped_by_shop():
    store = HistoryStore()
    store.append(_record("shop-a", 1.0, "first"))
    store.append(_record("shop-b", 2.0, "other shop"))
    store.append(_record("shop-a", 3.0, "second"))
    store.append(_record("shop-a", 4.0, "third"))

    recent = store.recent("shop-a", limit=2)
    assert [r.advice for r in recent] == ["third", "second"]
    assert store.recent("shop-c") == []


def test_jsonl_store_round_trips_records(tmp_path: Path):
    path = tmp_path / "history" / "records.jsonl"
    store = HistoryStore(path)
    record_recommendation(store, "shop-a", PREFS, "Layer the blazer.", ["p1", "p2"])

    reopened = HistoryStore(path)
    [record] = reopened.recent("shop-a")
    assert record.advice == "Layer the blazer."
    assert record.product_ids == ("p1", "p2")
    assert json.loads(record.preferences_snapshot)["size"] == "L"

    reopened.clear()
    assert not path.exists()


def test_records_are_immutable():
    record = _record("shop-a", 1.0)
    with pytest.raises(ValidationError):
        record.advice = "changed"


def test_record_product_ids_cannot_be_mutated_in_place():
    record = RecommendationRecord(shop_id="shop-a", preferences_snapshot="{}", product_ids=["p1"])
    assert record.product_ids == ("p1",)
    assert not hasattr(record.product_ids, "append")


def test_torn_jsonl_line_is_skipped(tmp_path: Path):
    path = tmp_path / "records.jsonl"
    store = HistoryStore(path)
    store.append(_record("s", 1.0, "before"))
    with path.open("a", encoding="utf-8") as fh:
        fh.write('{"shop_id": "s", "preferences_snap')

    with patch("stylist.recommendations.history.logger") as mock_logger:
        assert [r.advice for r in store.recent("s")] == ["before"]
    mock_logger.warning.assert_called_once()

    store.append(_record("s", 2.0, "after"))
    assert [r.advice for r in store.recent("s")] == ["after", "before"]


def test_write_failure_is_swallowed_and_reported():
    clear_events()
    store = MagicMock(spec=HistoryStore)
    store.append.side_effect = OSError("disk full")

    with patch("stylist.recommendations.history.logger") as mock_logger:
        record_recommendation(store, "shop-a", PREFS, "advice", ["p1"])

    mock_logger.warning.assert_called_once()
    failures = [e for e in get_events() if e["type"] == "history_write_failed"]
    assert len(failures) == 1
    assert failures[0]["shop_id"] == "shop-a"
