from __future__ import annotations

import logging
from typing import Any

from app.ai.types import LanguageModelGateway
from app.analysis.fallback import run_with_fallback
from app.analysis.prompts import ATS_OPTIMIZATION_PROMPT, render_prompt
from app.analysis.response import as_float, as_str, decode_object
from app.core.config import settings
from app.core.scoring import get_scoring_float
from app.schemas.resume import ATSOptimizationResult, CandidateProfile, Suggestion

logger = logging.getLogger(__name__)

_PRIORITIES = {"HIGH", "MEDIUM", "LOW"}


def _text(value: str | None) -> str:
    return value if value is not None else ""


def build_resume_text(profile: CandidateProfile) -> str:
    """Render a plain-text resume from the structured profile."""
    lines: list[str] = []
    if profile.candidate_name is not None:
        lines.append(f"Name: {profile.candidate_name}\n")
    if profile.email is not None:
        lines.append(f"Email: {profile.email}\n")
    if profile.phone is not None:
        lines.append(f"Phone: {profile.phone}\n")
    lines.append("\n")

    if profile.summary is not None:
        lines.append(f"SUMMARY\n{profile.summary}\n\n")

    if profile.skills:
        lines.append(f"SKILLS\n{', '.join(profile.skills)}\n\n")

    if profile.experiences:
        lines.append("EXPERIENCE\n")
        for exp in profile.experiences:
            lines.append(f"{_text(exp.position)} | {_text(exp.company)} | {_text(exp.duration)}\n")
            if exp.description is not None:
                lines.append(f"{exp.description}\n")
            lines.append("\n")

    if profile.educations:
        lines.append("EDUCATION\n")
        for edu in profile.educations:
            lines.append(
                f"{_text(edu.degree)} - {_text(edu.field)} | {_text(edu.institution)} | {_text(edu.year)}\n"
            )

    return "".join(lines)


def calculate_metrics(profile: CandidateProfile) -> dict[str, Any]:
    words = profile.raw_text.split()
    total_words = len(words)
    keyword_density = len(profile.skills) / total_words if total_words else 0.0
    return {
        "totalWords": total_words,
        "uniqueWords": len(set(words)),
        "keywordDensity": keyword_density,
        "meetsKeywordDensity": keyword_density >= settings.ats_required_density,
        "hasContactInfo": bool(profile.email) or bool(profile.phone),
        "hasStandardSections": bool(profile.skills) and bool(profile.experiences),
    }


def _parse_suggestion(raw: Any) -> Suggestion | None:
    if not isinstance(raw, dict):
        return None
    priority = as_str(raw.get("priority"), "MEDIUM").strip().upper()
    return Suggestion(
        category=as_str(raw.get("category"), "General") or "General",
        issue=as_str(raw.get("issue")),
        recommendation=as_str(raw.get("recommendation")),
        priority=priority if priority in _PRIORITIES else "MEDIUM",
    )


def _parse_suggestions(raw: Any) -> list[Suggestion]:
    if not isinstance(raw, list):
        return []
    suggestions = [item for item in (_parse_suggestion(entry) for entry in raw) if item is not None]
    return suggestions[: settings.ats_max_suggestions]


def _fallback_optimization(profile: CandidateProfile, metrics: dict[str, Any]) -> ATSOptimizationResult:
    return ATSOptimizationResult(
        resume_id=profile.id,
        ats_score=get_scoring_float("ats.default_score", 50.0),
        suggestions=[
            Suggestion(
                category="General",
                issue="Unable to perform automated analysis",
                recommendation="Please review resume manually for ATS optimization",
                priority="MEDIUM",
            )
        ],
        metrics=metrics,
        overall_assessment="Manual review recommended.",
    )


def optimize_ats(profile: CandidateProfile, gateway: LanguageModelGateway) -> ATSOptimizationResult:
    logger.info("ats_optimization_started resume=%s", profile.id)
    metrics = calculate_metrics(profile)

    def attempt() -> ATSOptimizationResult:
        prompt = render_prompt(ATS_OPTIMIZATION_PROMPT, {"resumeText": build_resume_text(profile)})
        reply = gateway.generate(prompt)
        logger.debug("ats_optimization_reply resume=%s reply=%s", profile.id, reply)
        data = decode_object(reply)
        return ATSOptimizationResult(
            resume_id=profile.id,
            ats_score=as_float(
                data.get("atsScore"),
                get_scoring_float("ats.default_score", 50.0),
                min_value=get_scoring_float("ats.score_range.min", 0.0),
                max_value=get_scoring_float("ats.score_range.max", 100.0),
            ),
            suggestions=_parse_suggestions(data.get("suggestions")),
            metrics=metrics,
            overall_assessment=as_str(data.get("overallAssessment")),
        )

    result = run_with_fallback(
        "ats_optimization",
        attempt,
        lambda _exc: _fallback_optimization(profile, metrics),
    )
    logger.info(
        "ats_optimization_done resume=%s score=%.1f suggestions=%s",
        profile.id,
        result.ats_score,
        len(result.suggestions),
    )
    return result
