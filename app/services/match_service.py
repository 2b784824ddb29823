from __future__ import annotations

import logging
from typing import Any

from app.ai.types import LanguageModelGateway
from app.analysis.fallback import run_with_fallback
from app.analysis.prompts import MATCH_ANALYSIS_PROMPT, render_prompt
from app.analysis.response import as_float, as_str, as_str_list, decode_object
from app.core.scoring import get_scoring_float
from app.schemas.resume import CandidateProfile, JobPosting, MatchResult

logger = logging.getLogger(__name__)

FALLBACK_ANALYSIS = "Unable to perform detailed analysis. Manual review is recommended."
FALLBACK_RECOMMENDATION = "Please review the resume manually"


def skills_match_score(candidate_skills: list[str], required_skills: list[str]) -> float:
    """Share of required skills present in the candidate's skills, case-insensitive."""
    required = {skill.lower() for skill in required_skills}
    candidate = {skill.lower() for skill in candidate_skills}
    if not required or not candidate:
        return 0.0
    return len(required & candidate) / len(required)


def _presence_score(items: list[Any]) -> float:
    if items:
        return get_scoring_float("matching.category_scores.present", 0.8)
    return get_scoring_float("matching.category_scores.absent", 0.4)


def calculate_category_scores(profile: CandidateProfile, job: JobPosting) -> dict[str, float]:
    return {
        "skills": skills_match_score(profile.skills, job.required_skills),
        "experience": _presence_score(profile.experiences),
        "education": _presence_score(profile.educations),
    }


def _joined(values: list[str], separator: str, default: str) -> str:
    return separator.join(values) if values else default


def build_prompt_variables(profile: CandidateProfile, job: JobPosting) -> dict[str, str]:
    experience = [
        f"{exp.position or 'Unknown'} at {exp.company or 'Unknown'}" for exp in profile.experiences
    ]
    education = [f"{edu.degree or 'Unknown'} in {edu.field or 'Unknown'}" for edu in profile.educations]
    return {
        "candidateName": profile.candidate_name or "Unknown",
        "skills": _joined(profile.skills, ", ", "None listed"),
        "experience": _joined(experience, "; ", "No experience listed"),
        "education": _joined(education, "; ", "No education listed"),
        "jobTitle": job.title or "Not specified",
        "requiredSkills": _joined(job.required_skills, ", ", "Not specified"),
        "responsibilities": _joined(job.responsibilities, "; ", "Not specified"),
        "qualifications": _joined(job.qualifications, "; ", "Not specified"),
    }


def _fallback_match(profile: CandidateProfile, job: JobPosting, category_scores: dict[str, float]) -> MatchResult:
    return MatchResult(
        resume_id=profile.id,
        job_description_id=job.id,
        match_score=get_scoring_float("matching.fallback.match_score", 0.5),
        matched_skills=[],
        missing_skills=[],
        analysis=FALLBACK_ANALYSIS,
        category_scores=category_scores,
        recommendations=[FALLBACK_RECOMMENDATION],
    )


def score_match(profile: CandidateProfile, job: JobPosting, gateway: LanguageModelGateway) -> MatchResult:
    logger.info("match_analysis_started resume=%s job=%s title=%s", profile.id, job.id, job.title)
    category_scores = calculate_category_scores(profile, job)

    def attempt() -> MatchResult:
        prompt = render_prompt(MATCH_ANALYSIS_PROMPT, build_prompt_variables(profile, job))
        reply = gateway.generate(prompt)
        logger.debug("match_analysis_reply resume=%s reply=%s", profile.id, reply)
        data = decode_object(reply)
        return MatchResult(
            resume_id=profile.id,
            job_description_id=job.id,
            match_score=as_float(data.get("matchScore"), 0.0, min_value=0.0, max_value=1.0),
            matched_skills=as_str_list(data.get("matchedSkills")),
            missing_skills=as_str_list(data.get("missingSkills")),
            analysis=as_str(data.get("analysis")),
            category_scores=category_scores,
            recommendations=as_str_list(data.get("recommendations")),
        )

    result = run_with_fallback(
        "match_analysis",
        attempt,
        lambda _exc: _fallback_match(profile, job, category_scores),
    )
    logger.info(
        "match_analysis_done resume=%s job=%s score=%.2f skills=%.2f",
        profile.id,
        job.id,
        result.match_score,
        category_scores["skills"],
    )
    return result
