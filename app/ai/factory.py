import logging

from app.ai.config import load_ai_config
from app.ai.types import GenerationFailure, LanguageModelGateway

from app.ai.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class DisabledGateway:
    """Gateway used when no model is configured; every call fails fast."""

    def __init__(self, reason: str = "Language model is disabled or not configured."):
        self._reason = reason

    def generate(self, prompt_text: str) -> str:
        raise GenerationFailure(self._reason, code="llm_disabled")


def get_gateway() -> LanguageModelGateway:
    cfg = load_ai_config()

    if not cfg.enabled:
        logger.info("llm_gateway_disabled provider=%s", cfg.provider)
        return DisabledGateway()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
