from __future__ import annotations

import re

from ..recommendations.models import CatalogItem

_MARKUP_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_description(text: str) -> str:
    """Strip markup tags and collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", _MARKUP_RE.sub(" ", text or "")).strip()


def build_product_text(item: CatalogItem) -> str:
    """Build the text a product is embedded as.

    Order matters for reproducible scoring: title, cleaned description, tags,
    category, vendor, then ``"<name>: <values>"`` for each option.
    """
    parts: list[str] = []
    if item.title:
        parts.append(item.title)

    description = clean_description(item.description)
    if description:
        parts.append(description)

    if item.tags:
        parts.append(" ".join(item.tags))
    if item.category:
        parts.append(item.category)
    if item.vendor:
        parts.append(item.vendor)

    if item.options:
        option_text = " ".join(
            f"{opt.name}: {', '.join(opt.values)}".strip() for opt in item.options if opt.name
        )
        if option_text:
            parts.append(option_text)

    return " ".join(parts).strip()
