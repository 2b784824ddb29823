from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from openai import OpenAI, OpenAIError

from app.ai.types import ChatMessage, GenerationFailure

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
        temperature: float = 0.2,
    ):
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is missing")
        self._model = model
        self._temperature = temperature
        self._client = OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    def _complete(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]
        started = time.perf_counter()
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=payload,
                temperature=self._temperature,
            )
        except OpenAIError as exc:
            logger.warning("llm_generate_failed model=%s: %s", self._model, exc)
            raise GenerationFailure(f"Language model call failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        logger.info(
            "llm_generate_done model=%s latency_ms=%s reply_len=%s",
            self._model,
            int((time.perf_counter() - started) * 1000),
            len(content or ""),
        )
        if not content:
            raise GenerationFailure("Language model returned an empty reply.", code="empty_response")
        return content

    def generate(self, prompt_text: str) -> str:
        return self._complete([ChatMessage(role="user", content=prompt_text)])
