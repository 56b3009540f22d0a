from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from ..analytics.store import record_event
from ..catalog.config import DEFAULT_CATALOG_CONFIG
from .models import Preferences, RecommendationRecord

logger = logging.getLogger(__name__)


class HistoryStore:
    """Append-only log of completed recommendation requests.

    Records live in memory, or as JSON lines in *path* when one is given.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._records: list[RecommendationRecord] = []
        self._lock = threading.Lock()

    def append(self, record: RecommendationRecord) -> None:
        with self._lock:
            if self.path is not None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                prefix = "\n" if self._ends_mid_line() else ""
                with self.path.open("a", encoding="utf-8") as fh:
                    fh.write(prefix + record.model_dump_json() + "\n")
            else:
                self._records.append(record)

    def _ends_mid_line(self) -> bool:
        # a torn write leaves the file without its trailing newline
        if not self.path.exists() or self.path.stat().st_size == 0:
            return False
        with self.path.open("rb") as fh:
            fh.seek(-1, 2)
            return fh.read(1) != b"\n"

    def _all(self) -> list[RecommendationRecord]:
        if self.path is None:
            return list(self._records)
        if not self.path.exists():
            return []
        records: list[RecommendationRecord] = []
        with self.path.open(encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(RecommendationRecord.model_validate_json(line))
                except ValidationError:
                    logger.warning("Skipping unreadable history line %d in %s", lineno, self.path)
        return records

    def recent(self, shop_id: str, limit: int = 5) -> list[RecommendationRecord]:
        """Return the newest *limit* records for *shop_id*, newest first."""
        with self._lock:
            records = [r for r in self._all() if r.shop_id == shop_id]
        # The log is append-only, so insertion order is chronological.
        return records[::-1][:limit]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            if self.path is not None and self.path.exists():
                self.path.unlink()


DEFAULT_HISTORY_STORE = HistoryStore(DEFAULT_CATALOG_CONFIG.history_path)


def snapshot_preferences(preferences: Preferences) -> str:
    return json.dumps({
        "budget": preferences.budget_tier.value,
        "size": preferences.size,
        "style": preferences.style,
        "occasion": preferences.occasion,
        "weather": preferences.weather,
    })


def record_recommendation(
    store: HistoryStore,
    shop_id: str,
    preferences: Preferences,
    advice: str,
    product_ids: Sequence[str],
) -> None:
    """Persist a completed request. Failures are logged and swallowed."""
    try:
        store.append(RecommendationRecord(
            shop_id=shop_id,
            preferences_snapshot=snapshot_preferences(preferences),
            advice=advice,
            product_ids=tuple(product_ids),
        ))
    except Exception:
        logger.warning("Failed to save outfit recommendation", exc_info=True)
        record_event("history_write_failed", {"shop_id": shop_id})
