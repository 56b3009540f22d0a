from __future__ import annotations

from collections import Counter
from typing import Any


def _top(counter: Counter[str], n: int = 10) -> list[dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in counter.most_common(n)]


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] == "recommendation"]
    total = len(requests)

    # Average response time
    times = [r["response_time_ms"] for r in requests if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    no_matches = sum(1 for r in requests if r.get("total_candidates", 0) == 0)
    served = [r for r in requests if r.get("total_candidates", 0) > 0]

    style_counter: Counter[str] = Counter(r.get("style", "unknown") for r in requests)
    occasion_counter: Counter[str] = Counter(r.get("occasion", "unknown") for r in requests)
    weather_counter: Counter[str] = Counter(r.get("weather", "unknown") for r in requests)
    budget_usage = dict(Counter(r.get("budget_tier", "unknown") for r in requests))

    # Which selection tier produced the final products
    tier_usage = dict(Counter(r["match_tier"] for r in served if r.get("match_tier")))

    semantic = sum(1 for r in served if r.get("semantic"))
    returned = [r.get("results_returned", 0) for r in served]

    history_failures = sum(1 for e in events if e["type"] == "history_write_failed")

    return {
        "total_requests": total,
        "no_match_requests": no_matches,
        "avg_response_time_ms": avg_time,
        "top_styles": _top(style_counter),
        "top_occasions": _top(occasion_counter),
        "top_weather": _top(weather_counter),
        "budget_tier_usage": budget_usage,
        "match_tier_usage": tier_usage,
        "semantic_ranking_rate": round(semantic / len(served) * 100, 1) if served else 0.0,
        "avg_products_returned": round(sum(returned) / len(returned), 2) if returned else 0.0,
        "history_write_failures": history_failures,
    }
