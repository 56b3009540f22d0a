from __future__ import annotations

import logging

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


def generate_outfit_text(prompt: str, config: LLMConfig = DEFAULT_LLM_CONFIG) -> str:
    """
    Send the stylist prompt to the Groq LLM and return its raw text.

    Returns an empty string on any failure (disabled, missing key, timeout,
    API error). The caller parses whatever comes back.
    """
    if not config.enabled or not config.api_key:
        return ""

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
        return response.choices[0].message.content or ""

    except Exception:
        logger.warning("Groq LLM call failed, falling back to catalog picks", exc_info=True)
        return ""
