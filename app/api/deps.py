from __future__ import annotations

from functools import lru_cache

from app.ai.factory import get_gateway
from app.ai.types import LanguageModelGateway
from app.core.config import settings
from app.core.resume_store import ResumeStore, SqliteResumeStore
from app.semantic.embeddings import HashingEmbeddingProvider, SentenceTransformerEmbeddingProvider
from app.semantic.vector_store import ResumeVectorStore


@lru_cache(maxsize=1)
def get_llm_gateway() -> LanguageModelGateway:
    return get_gateway()


@lru_cache(maxsize=1)
def get_resume_store() -> ResumeStore:
    return SqliteResumeStore(settings.resume_db_path)


@lru_cache(maxsize=1)
def get_vector_store() -> ResumeVectorStore:
    if settings.embedding_provider == "hashing":
        return ResumeVectorStore(HashingEmbeddingProvider())
    return ResumeVectorStore(SentenceTransformerEmbeddingProvider(settings.embedding_model))
