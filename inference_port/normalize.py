"""JSON-first normalization of raw backend output."""

from __future__ import annotations

import json

from pydantic import JsonValue

from .errors import MalformedResponse


def _reject_constant(name: str) -> None:
    # json.loads accepts NaN/Infinity, which are not JSON.
    raise ValueError(f"Non-standard JSON constant: {name}")


def normalize_content(raw: str | None) -> JsonValue:
    """Turn raw backend text into response content.

    Valid JSON is returned as the parsed value; anything else (including
    truncated JSON) becomes a JSON string holding the raw text.

    Raises:
        MalformedResponse: If the backend produced no content at all.
    """
    if raw is None:
        raise MalformedResponse("Backend returned no content")

    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return raw
