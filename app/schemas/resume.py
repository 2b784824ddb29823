from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Priority = Literal["HIGH", "MEDIUM", "LOW"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def _scalar_as_text(value: Any) -> Any:
    # Models often emit years or phone numbers as JSON numbers.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Experience(CamelModel):
    company: str | None = None
    position: str | None = None
    duration: str | None = None
    description: str | None = None
    achievements: list[str] = Field(default_factory=list)

    @field_validator("company", "position", "duration", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _scalar_as_text(value)

    @field_validator("achievements", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value


class Education(CamelModel):
    institution: str | None = None
    degree: str | None = None
    field: str | None = None
    year: str | None = None

    @field_validator("institution", "degree", "field", "year", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _scalar_as_text(value)


class ProfileExtraction(CamelModel):
    """Shape of the resume-parsing reply; unknown keys are ignored."""

    candidate_name: str | None = None
    email: str | None = None
    phone: str | None = None
    summary: str | None = None
    skills: list[str] = Field(default_factory=list)
    experiences: list[Experience] = Field(default_factory=list)
    educations: list[Education] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)

    @field_validator("candidate_name", "email", "phone", "summary", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _scalar_as_text(value)

    @field_validator("skills", "experiences", "educations", "certifications", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value


class CandidateProfile(CamelModel):
    id: str = Field(min_length=1)
    file_name: str | None = None
    raw_text: str
    candidate_name: str | None = None
    email: str | None = None
    phone: str | None = None
    summary: str | None = None
    skills: list[str] = Field(default_factory=list)
    experiences: list[Experience] = Field(default_factory=list)
    educations: list[Education] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    parsed_at: datetime

    @field_validator("skills", "experiences", "educations", "certifications", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_as_empty_mapping(cls, value: Any) -> Any:
        return {} if value is None else value


class JobPosting(CamelModel):
    id: str | None = None
    title: str | None = None
    company: str | None = None
    description: str | None = None
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    experience_level: str | None = None
    location: str | None = None
    responsibilities: list[str] = Field(default_factory=list)
    qualifications: list[str] = Field(default_factory=list)

    @field_validator(
        "required_skills",
        "preferred_skills",
        "responsibilities",
        "qualifications",
        mode="before",
    )
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value


class MatchResult(CamelModel):
    resume_id: str
    job_description_id: str | None = None
    match_score: float = Field(ge=0.0, le=1.0)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    analysis: str = ""
    category_scores: dict[str, float] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)


class Suggestion(CamelModel):
    category: str = "General"
    issue: str = ""
    recommendation: str = ""
    priority: Priority = "MEDIUM"


class ATSOptimizationResult(CamelModel):
    resume_id: str
    ats_score: float = Field(ge=0.0, le=100.0)
    suggestions: list[Suggestion] = Field(default_factory=list)
    metrics: dict[str, Any] = Field(default_factory=dict)
    overall_assessment: str = ""
