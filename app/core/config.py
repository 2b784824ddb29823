from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    llm_enabled: bool
    ai_provider: str
    ai_model: str
    openai_api_key: str | None
    openai_base_url: str | None
    llm_timeout_s: float
    openai_max_retries: int
    llm_temperature: float
    resume_db_path: str
    resume_allowed_extensions: tuple[str, ...]
    max_upload_bytes: int
    embedding_provider: str
    embedding_model: str
    ats_required_density: float
    ats_max_suggestions: int


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    llm_enabled=_get_env_bool("LLM_ENABLED", True),
    ai_provider=(_get_env("AI_PROVIDER", "openai") or "openai").strip().lower(),
    ai_model=(_get_env("AI_MODEL", "gpt-4o-mini") or "gpt-4o-mini").strip(),
    openai_api_key=_get_env("OPENAI_API_KEY"),
    openai_base_url=_get_env("OPENAI_BASE_URL"),
    llm_timeout_s=_get_env_float("LLM_TIMEOUT_S", 60.0),
    openai_max_retries=_get_env_int("OPENAI_MAX_RETRIES", 2),
    llm_temperature=_get_env_float("LLM_TEMPERATURE", 0.2),
    resume_db_path=_get_env("RESUME_DB_PATH", "data/resumes.db") or "data/resumes.db",
    resume_allowed_extensions=tuple(
        ext.lower() for ext in _get_env_list("RESUME_ALLOWED_EXTENSIONS", ["pdf", "docx", "doc"])
    ),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    embedding_provider=(_get_env("EMBEDDING_PROVIDER", "sentence-transformers") or "sentence-transformers").strip().lower(),
    embedding_model=_get_env("EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2")
    or "sentence-transformers/all-MiniLM-L6-v2",
    ats_required_density=_get_env_float("ATS_REQUIRED_DENSITY", 0.02),
    ats_max_suggestions=_get_env_int("ATS_MAX_SUGGESTIONS", 10),
)

if settings.embedding_provider not in {"sentence-transformers", "hashing"}:
    raise RuntimeError("EMBEDDING_PROVIDER must be either 'sentence-transformers' or 'hashing'.")

if settings.ats_max_suggestions < 1:
    raise RuntimeError("ATS_MAX_SUGGESTIONS must be at least 1.")
