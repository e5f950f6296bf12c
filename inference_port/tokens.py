"""Default token estimation."""

from __future__ import annotations

import math

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate the token count of ``text``.

    Roughly one token per four characters, never zero for non-empty text.
    Adapters for real backends may replace this with a provider tokenizer.
    """
    if not text:
        return 0
    return max(1, math.ceil(len(text) / CHARS_PER_TOKEN))
