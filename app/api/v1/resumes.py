from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status

from app.ai.types import LanguageModelGateway
from app.api.deps import get_llm_gateway, get_resume_store, get_vector_store
from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.core.resume_store import ResumeStore
from app.schemas.resume import ATSOptimizationResult, CandidateProfile, JobPosting, MatchResult
from app.schemas.search import CandidateHit, KeywordRequest, KeywordResponse, SimilarResumeOut
from app.semantic.vector_store import ResumeVectorStore, build_job_query
from app.services.ats_service import optimize_ats
from app.services.document_service import (
    DocumentExtractionError,
    UnsupportedFormat,
    extract_metadata,
    extract_text,
    is_valid_file_type,
)
from app.services.match_service import score_match
from app.services.resume_parsing_service import extract_keywords, extract_profile

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_resume(store: ResumeStore, resume_id: str) -> CandidateProfile:
    profile = store.get(resume_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found.")
    return profile


@router.post("/resumes/upload", response_model=CandidateProfile)
@rate_limit("20/minute")
def upload_resume(
    request: Request,
    file: UploadFile = File(...),
    gateway: LanguageModelGateway = Depends(get_llm_gateway),
    store: ResumeStore = Depends(get_resume_store),
    vector_store: ResumeVectorStore = Depends(get_vector_store),
):
    _ = request
    filename = file.filename or ""
    logger.info("resume_upload_received file=%s", filename)
    if not is_valid_file_type(filename):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Supported: PDF, DOCX, DOC",
        )

    content = file.file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
        )

    try:
        text = extract_text(content, filename)
    except UnsupportedFormat as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DocumentExtractionError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    profile = extract_profile(text, filename, gateway)
    profile = profile.model_copy(
        update={"metadata": {**profile.metadata, **extract_metadata(filename, content, file.content_type)}}
    )
    store.save(profile)
    try:
        vector_store.store(profile)
    except Exception as exc:  # noqa: BLE001 - search indexing must not lose a parsed resume
        logger.warning("vector_store_add_failed resume=%s: %s", profile.id, exc)
    return profile


@router.get("/resumes", response_model=list[CandidateProfile])
def list_resumes(store: ResumeStore = Depends(get_resume_store)):
    return store.list_all()


@router.get("/resumes/search", response_model=list[SimilarResumeOut])
@rate_limit()
def search_resumes(
    request: Request,
    query: str = Query(min_length=1, max_length=2000),
    top_k: int = Query(default=5, ge=1, le=50, alias="topK"),
    vector_store: ResumeVectorStore = Depends(get_vector_store),
):
    _ = request
    hits = vector_store.search_similar_resumes(query, top_k)
    return [SimilarResumeOut(content=hit.text, metadata=hit.metadata) for hit in hits]


@router.post("/resumes/find-candidates", response_model=list[CandidateHit])
@rate_limit()
def find_candidates(
    request: Request,
    job: JobPosting,
    vector_store: ResumeVectorStore = Depends(get_vector_store),
):
    _ = request
    logger.info("find_candidates job=%s title=%s", job.id, job.title)
    hits = vector_store.find_matching_resumes(build_job_query(job))
    return [
        CandidateHit(
            resume_id=hit.metadata.get("resumeId"),
            candidate_name=hit.metadata.get("candidateName"),
            relevance_score=hit.score,
        )
        for hit in hits
    ]


@router.post("/resumes/keywords", response_model=KeywordResponse)
@rate_limit()
def resume_keywords(
    request: Request,
    payload: KeywordRequest,
    gateway: LanguageModelGateway = Depends(get_llm_gateway),
):
    _ = request
    return KeywordResponse(keywords=extract_keywords(payload.text, gateway))


@router.get("/resumes/{resume_id}", response_model=CandidateProfile)
def get_resume(resume_id: str, store: ResumeStore = Depends(get_resume_store)):
    return _require_resume(store, resume_id)


@router.post("/resumes/{resume_id}/match", response_model=MatchResult)
@rate_limit()
def match_resume(
    request: Request,
    resume_id: str,
    job: JobPosting,
    gateway: LanguageModelGateway = Depends(get_llm_gateway),
    store: ResumeStore = Depends(get_resume_store),
):
    _ = request
    profile = _require_resume(store, resume_id)
    return score_match(profile, job, gateway)


@router.post("/resumes/{resume_id}/optimize-ats", response_model=ATSOptimizationResult)
@rate_limit()
def optimize_resume_for_ats(
    request: Request,
    resume_id: str,
    gateway: LanguageModelGateway = Depends(get_llm_gateway),
    store: ResumeStore = Depends(get_resume_store),
):
    _ = request
    profile = _require_resume(store, resume_id)
    return optimize_ats(profile, gateway)
