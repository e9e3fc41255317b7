"""Lenient JSON object extraction from LLM responses.

Models asked for JSON sometimes wrap it in a Markdown code fence or add a
sentence before or after it. ``parse_json_response`` tries the raw text,
then the first fenced block, then the outermost ``{...}`` span.
"""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*\n(.*?)\n\s*```", re.DOTALL | re.IGNORECASE)


def parse_json_response(content: str) -> dict[str, Any]:
    """Return the JSON object carried by ``content``.

    Raises:
        json.JSONDecodeError: If no candidate decodes to a JSON object
    """
    last_error: json.JSONDecodeError | None = None
    for candidate in _candidates(content or ""):
        try:
            obj = json.loads(candidate)
        except json.JSONDecodeError as exc:
            last_error = exc
            continue
        if isinstance(obj, dict):
            return obj
    if last_error is not None:
        raise last_error
    raise json.JSONDecodeError("No JSON object found", content or "", 0)


def _candidates(content: str) -> list[str]:
    candidates = [content.strip()] if content.strip() else []
    fenced = _FENCE_RE.search(content)
    if fenced:
        candidates.append(fenced.group(1).strip())
    start, end = content.find("{"), content.rfind("}")
    if 0 <= start < end:
        candidates.append(content[start : end + 1])
    return candidates
