from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone

from pydantic import ValidationError

from app.ai.types import LanguageModelGateway
from app.analysis.fallback import run_with_fallback
from app.analysis.prompts import KEYWORD_EXTRACTION_PROMPT, RESUME_PARSING_PROMPT, render_prompt
from app.analysis.response import MalformedResponse, decode_object, extract_json
from app.schemas.resume import CandidateProfile, ProfileExtraction

logger = logging.getLogger(__name__)

_KEYWORD_SPLIT_RE = re.compile(r",\s*")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_resume_id() -> str:
    return str(uuid.uuid4())


def _decode_profile(reply: str) -> ProfileExtraction:
    data = decode_object(reply)
    try:
        return ProfileExtraction.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponse(f"Resume reply does not match the profile shape: {exc}") from exc


def _fallback_profile(raw_text: str, file_name: str | None) -> CandidateProfile:
    return CandidateProfile(
        id=_new_resume_id(),
        file_name=file_name,
        raw_text=raw_text,
        parsed_at=_utc_now(),
        skills=[],
        experiences=[],
        educations=[],
        certifications=[],
        metadata={},
    )


def extract_profile(raw_text: str, file_name: str | None, gateway: LanguageModelGateway) -> CandidateProfile:
    """Turn raw resume text into a CandidateProfile.

    Identity, file name, raw text and timestamp are always assigned here and
    never read from the model reply. Any failure yields a profile carrying
    only those four fields.
    """
    logger.info("resume_parse_started file=%s chars=%s", file_name, len(raw_text or ""))

    def attempt() -> CandidateProfile:
        prompt = render_prompt(RESUME_PARSING_PROMPT, {"resumeText": raw_text})
        reply = gateway.generate(prompt)
        logger.debug("resume_parse_reply file=%s reply=%s", file_name, reply)
        extracted = _decode_profile(reply)
        return CandidateProfile(
            **extracted.model_dump(),
            id=_new_resume_id(),
            file_name=file_name,
            raw_text=raw_text,
            parsed_at=_utc_now(),
            metadata={},
        )

    profile = run_with_fallback(
        "resume_parsing",
        attempt,
        lambda _exc: _fallback_profile(raw_text, file_name),
    )
    logger.info(
        "resume_parse_done id=%s skills=%s experiences=%s",
        profile.id,
        len(profile.skills),
        len(profile.experiences),
    )
    return profile


def extract_keywords(text: str, gateway: LanguageModelGateway) -> list[str]:
    def attempt() -> list[str]:
        prompt = render_prompt(KEYWORD_EXTRACTION_PROMPT, {"text": text})
        reply = extract_json(gateway.generate(prompt))
        keywords: list[str] = []
        seen: set[str] = set()
        for item in _KEYWORD_SPLIT_RE.split(reply):
            keyword = item.strip()
            if keyword and keyword.lower() not in seen:
                seen.add(keyword.lower())
                keywords.append(keyword)
        return keywords

    return run_with_fallback("keyword_extraction", attempt, lambda _exc: [])
