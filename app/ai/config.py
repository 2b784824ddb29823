from dataclasses import dataclass

from app.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    enabled: bool
    provider: str
    model: str
    api_key: str
    base_url: str | None
    timeout_s: float
    max_retries: int
    temperature: float


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def load_ai_config() -> AIConfig:
    api_key = (settings.openai_api_key or "").strip()
    enabled = settings.llm_enabled and bool(api_key) and not _looks_like_placeholder(api_key)
    return AIConfig(
        enabled=enabled,
        provider=settings.ai_provider,
        model=settings.ai_model,
        api_key=api_key,
        base_url=(settings.openai_base_url or "").strip() or None,
        timeout_s=settings.llm_timeout_s,
        max_retries=settings.openai_max_retries,
        temperature=settings.llm_temperature,
    )
