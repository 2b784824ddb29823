from __future__ import annotations

import json
import math
from typing import Any

_JSON_FENCE = "```json"
_FENCE = "```"


class MalformedResponse(ValueError):
    pass


def _strip_fences_once(text: str) -> str:
    text = text.strip()
    if text.startswith(_JSON_FENCE):
        text = text[len(_JSON_FENCE):]
    elif text.startswith(_FENCE):
        text = text[len(_FENCE):]
    if text.endswith(_FENCE):
        text = text[: -len(_FENCE)]
    return text.strip()


def extract_json(reply: str) -> str:
    """Strip markdown code fences around a model reply.

    Best-effort text cleanup only; the result is not guaranteed to be JSON.
    Stripping repeats until the text stops changing, which keeps the
    function idempotent for nested or stacked fences.
    """
    current = reply or ""
    while True:
        stripped = _strip_fences_once(current)
        if stripped == current:
            return stripped
        current = stripped


def decode_object(reply: str) -> dict[str, Any]:
    payload = extract_json(reply)
    if not payload:
        raise MalformedResponse("Model reply was empty after cleanup.")
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"Model reply is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(parsed).__name__}.")
    return parsed


def as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return default


def as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    items: list[str] = []
    for item in value:
        text = as_str(item, "").strip()
        if text:
            items.append(text)
    return items


def as_float(value: Any, default: float, *, min_value: float | None = None, max_value: float | None = None) -> float:
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    if min_value is not None:
        number = max(min_value, number)
    if max_value is not None:
        number = min(max_value, number)
    return number
