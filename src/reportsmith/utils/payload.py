"""JSON payload extraction for generator output.

Outline generators sometimes wrap their JSON in markdown fences or surround it with prose.
"""

from __future__ import annotations

import json
import re
from typing import Any

from reportsmith.logging import get_logger

logger = get_logger(__name__)

_FENCE_JSON_RE = re.compile(r"```json\s*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)
_FENCE_ANY_RE = re.compile(r"```\s*\n?(.*?)\n?```", re.DOTALL)


def _loads(text: str) -> Any | None:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def extract_json(text: str) -> Any | None:
    """Extract a JSON object or array from generator output.

    Strategy (strict to lenient):
        1. a ```json fenced block, then any fenced block;
        2. the whole text;
        3. the outermost `{...}` or `[...]` span, whichever starts first.

    Returns None instead of raising when nothing parses.
    """

    if not text:
        return None

    cleaned = text.strip()

    m = _FENCE_JSON_RE.search(cleaned) or _FENCE_ANY_RE.search(cleaned)
    if m:
        data = _loads(m.group(1).strip())
        if data is not None:
            return data
        logger.debug("extract_json: fenced block is not valid JSON")

    data = _loads(cleaned)
    if data is not None:
        return data

    spans: list[tuple[int, int]] = []
    for opener, closer in (("{", "}"), ("[", "]")):
        start, end = cleaned.find(opener), cleaned.rfind(closer)
        if start != -1 and end > start:
            spans.append((start, end))
    # Outermost structure first
    for start, end in sorted(spans):
        data = _loads(cleaned[start : end + 1])
        if data is not None:
            return data

    logger.debug("extract_json: no JSON payload found")
    return None
