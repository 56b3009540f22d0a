from __future__ import annotations

from typing import Sequence

from ..recommendations.models import Preferences, ScoredCandidate

SYSTEM_PROMPT = (
    "You are an elite fashion consultant with years of experience in personal styling. "
    "You must respond ONLY in valid JSON.\n\n"
    "Return the response in this exact format:\n"
    "{\n"
    '  "recommendation_text": "string",\n'
    '  "color_palette": ["string", "string", "string"],\n'
    '  "recommended_titles": ["product title", "product title"]\n'
    "}"
)


def _format_candidate(index: int, candidate: ScoredCandidate) -> str:
    score_text = ""
    if candidate.similarity_score is not None:
        score_text = f" (relevance: {candidate.similarity_score * 100:.0f}%)"
    price = f"${candidate.price:.2f}" if candidate.price is not None else "N/A"
    return (
        f"{index}. {candidate.title}{score_text}\n"
        f"   Price: {price}\n"
        f"   Tags: {', '.join(candidate.tags)}"
    )


def build_stylist_prompt(
    preferences: Preferences,
    candidates: Sequence[ScoredCandidate],
    limit: int = 20,
) -> str:
    top = list(candidates)[:limit]
    products_text = "\n\n".join(_format_candidate(i, c) for i, c in enumerate(top, start=1))
    p = preferences

    lines = [
        "## Client Profile",
        f"- Budget: {p.budget_tier.value}",
        f"- Size: {p.size}",
        f"- Style preference: {p.style}",
        f"- Occasion: {p.occasion}",
        f"- Weather: {p.weather}",
        "",
        "## Curated Product Collection",
        products_text,
        "",
        "## Your Task",
        "1. Select 2-5 complementary pieces that work together, suited to "
        f"{p.style} style at {p.occasion} in {p.weather} weather.",
        "2. Write a warm, conversational styling story explaining the choices, "
        "with a few practical tips on how to wear and accessorize them.",
        '3. Suggest 3-4 specific colors for a cohesive palette (e.g. "Midnight Navy", "Warm Caramel").',
        "",
        "CRITICAL: Use EXACT product titles from the list above in recommended_titles.",
        "",
        "## Response Format (JSON only)",
        "{",
        '  "recommendation_text": "Your styling story here...",',
        '  "color_palette": ["Color 1", "Color 2", "Color 3"],',
        '  "recommended_titles": ["Exact Product Title 1", "Exact Product Title 2"]',
        "}",
    ]
    return "\n".join(lines)
