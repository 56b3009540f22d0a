"""
Recovery of a structured pick from free-form model output.

Each stage is a pure function from the raw text to an ``AiPick`` or ``None``;
``parse_ai_response`` tries them in a fixed order and the last stage always
succeeds.
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable

from ..recommendations.models import AiPick, PickSource

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _pick_from_payload(payload: Any, source: PickSource) -> AiPick | None:
    if not isinstance(payload, dict):
        return None
    narrative = payload.get("recommendation_text")
    return AiPick(
        narrative=narrative if isinstance(narrative, str) else "",
        color_palette=_string_list(payload.get("color_palette")),
        titles=_string_list(payload.get("recommended_titles")),
        source=source,
    )


def _parse_fenced(text: str) -> AiPick | None:
    cleaned = _FENCE_RE.sub("", text).strip()
    try:
        payload = json.loads(cleaned)
    except ValueError:
        return None
    return _pick_from_payload(payload, PickSource.structured)


def _parse_embedded(text: str) -> AiPick | None:
    match = _OBJECT_RE.search(text)
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except ValueError:
        return None
    return _pick_from_payload(payload, PickSource.partially_recovered)


def _raw_text(text: str) -> AiPick:
    return AiPick(narrative=text, source=PickSource.raw_text)


_STAGES: tuple[Callable[[str], AiPick | None], ...] = (_parse_fenced, _parse_embedded)


def parse_ai_response(text: str | None) -> AiPick:
    """Turn raw model text into an ``AiPick``. Never raises."""
    raw = text or ""
    for stage in _STAGES:
        pick = stage(raw)
        if pick is not None:
            return pick
    return _raw_text(raw)
