from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.schemas.resume import CamelModel


class SimilarResumeOut(BaseModel):
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class CandidateHit(CamelModel):
    resume_id: str | None = None
    candidate_name: str | None = None
    relevance_score: float


class KeywordRequest(BaseModel):
    text: str = Field(min_length=1, max_length=120000)


class KeywordResponse(BaseModel):
    keywords: list[str] = Field(default_factory=list)
