from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

import faiss
import numpy as np

from app.core.scoring import get_scoring_float, get_scoring_value
from app.schemas.resume import CandidateProfile, JobPosting
from app.semantic.embeddings import EmbeddingProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarResume:
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)
    score: float = 0.0


def build_document_text(profile: CandidateProfile) -> str:
    parts: list[str] = [f"Candidate: {profile.candidate_name or 'Unknown'}\n\n"]

    if profile.summary:
        parts.append(f"Summary: {profile.summary}\n\n")

    if profile.skills:
        parts.append(f"Skills: {', '.join(profile.skills)}\n\n")

    if profile.experiences:
        parts.append("Experience:\n")
        for exp in profile.experiences:
            parts.append(f"- {exp.position or ''} at {exp.company or ''} ({exp.duration or ''})\n")
            if exp.description:
                parts.append(f"  {exp.description}\n")
        parts.append("\n")

    if profile.educations:
        parts.append("Education:\n")
        for edu in profile.educations:
            parts.append(
                f"- {edu.degree or ''} in {edu.field or ''} from {edu.institution or ''} ({edu.year or ''})\n"
            )
        parts.append("\n")

    if profile.certifications:
        parts.append(f"Certifications: {', '.join(profile.certifications)}")

    text = "".join(parts).strip()
    # Fallback profiles carry no structure, so index the raw resume instead.
    if not (profile.skills or profile.experiences or profile.educations or profile.summary):
        text = f"{text}\n\n{profile.raw_text}".strip()
    return text


def build_job_query(job: JobPosting) -> str:
    parts = [job.title or ""]
    if job.required_skills:
        parts.append(" ".join(job.required_skills))
    if job.description:
        parts.append(job.description)
    return " ".join(part for part in parts if part).strip()


class ResumeVectorStore:
    """In-process faiss index over resume documents (inner product on unit vectors)."""

    def __init__(self, embedder: EmbeddingProvider):
        self._embedder = embedder
        self._lock = threading.Lock()
        self._index: faiss.IndexFlatIP | None = None
        self._documents: list[SimilarResume] = []

    def __len__(self) -> int:
        return len(self._documents)

    def _vectors(self, texts: list[str]) -> np.ndarray:
        return np.asarray(self._embedder.embed(texts), dtype="float32")

    def store(self, profile: CandidateProfile) -> None:
        logger.info("vector_store_add resume=%s", profile.id)
        text = build_document_text(profile)
        metadata = {
            "resumeId": profile.id,
            "fileName": profile.file_name,
            "candidateName": profile.candidate_name,
            "email": profile.email,
            "type": "resume",
        }
        vectors = self._vectors([text])
        with self._lock:
            if self._index is None:
                self._index = faiss.IndexFlatIP(vectors.shape[1])
            self._index.add(vectors)
            self._documents.append(SimilarResume(text=text, metadata=metadata))

    def query_similar(self, query: str, top_k: int, similarity_threshold: float) -> list[SimilarResume]:
        q = (query or "").strip()
        if not q or top_k <= 0:
            return []

        emb = self._vectors([q])
        with self._lock:
            if self._index is None or not self._documents:
                return []
            k = min(top_k, len(self._documents))
            scores, idxs = self._index.search(emb, k)
            documents = list(self._documents)

        results: list[SimilarResume] = []
        for score, idx in zip(scores[0].tolist(), idxs[0].tolist()):
            if idx < 0 or idx >= len(documents):
                continue
            if score < similarity_threshold:
                continue
            doc = documents[idx]
            results.append(SimilarResume(text=doc.text, metadata=dict(doc.metadata), score=float(score)))
        logger.info("vector_store_query top_k=%s threshold=%s hits=%s", top_k, similarity_threshold, len(results))
        return results

    def search_similar_resumes(self, query: str, top_k: int | None = None) -> list[SimilarResume]:
        return self.query_similar(
            query,
            top_k or int(get_scoring_value("search.default_top_k", 5)),
            get_scoring_float("search.similarity_thresholds.similar_resumes", 0.7),
        )

    def find_matching_resumes(self, job_query: str, top_k: int | None = None) -> list[SimilarResume]:
        return self.query_similar(
            job_query,
            top_k or int(get_scoring_value("search.candidates_top_k", 10)),
            get_scoring_float("search.similarity_thresholds.job_candidates", 0.6),
        )
