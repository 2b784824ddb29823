from __future__ import annotations

import logging
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_with_fallback(
    stage: str,
    attempt: Callable[[], T],
    recover: Callable[[Exception], T],
) -> T:
    """Run a model-backed stage and convert any failure into a default result.

    ``attempt`` covers prompt rendering, the gateway call and response
    decoding. Whatever it raises is logged and handed to ``recover``, which
    must build a complete result from locally available data only.
    """
    try:
        return attempt()
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        code = getattr(exc, "code", type(exc).__name__)
        logger.warning("analysis_fallback stage=%s reason=%s: %s", stage, code, exc)
        return recover(exc)
