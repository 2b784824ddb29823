from __future__ import annotations

import os
import sqlite3
import threading
from typing import Protocol

from app.schemas.resume import CandidateProfile


class ResumeStore(Protocol):
    def save(self, profile: CandidateProfile) -> None: ...

    def get(self, resume_id: str) -> CandidateProfile | None: ...

    def list_all(self) -> list[CandidateProfile]: ...


class SqliteResumeStore:
    """Keeps parsed profiles as JSON documents keyed by resume id."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._lock = threading.Lock()
        if db_path != ":memory:":
            directory = os.path.dirname(db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

        self._conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        if db_path != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._conn.execute("PRAGMA busy_timeout=5000;")
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS parsed_resumes (
                resume_id TEXT PRIMARY KEY,
                file_name TEXT,
                candidate_name TEXT,
                profile_json TEXT NOT NULL,
                parsed_at TEXT NOT NULL
            );
            """
        )
        self._conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_parsed_resumes_parsed_at
            ON parsed_resumes (parsed_at);
            """
        )

    def save(self, profile: CandidateProfile) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT OR REPLACE INTO parsed_resumes (
                    resume_id, file_name, candidate_name, profile_json, parsed_at
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    profile.id,
                    profile.file_name,
                    profile.candidate_name,
                    profile.model_dump_json(by_alias=True),
                    profile.parsed_at.isoformat(),
                ),
            )

    def get(self, resume_id: str) -> CandidateProfile | None:
        with self._lock:
            cur = self._conn.execute(
                "SELECT profile_json FROM parsed_resumes WHERE resume_id = ?",
                (resume_id,),
            )
            row = cur.fetchone()
        if not row:
            return None
        return CandidateProfile.model_validate_json(row[0])

    def list_all(self) -> list[CandidateProfile]:
        with self._lock:
            cur = self._conn.execute("SELECT profile_json FROM parsed_resumes ORDER BY parsed_at, resume_id")
            rows = cur.fetchall()
        return [CandidateProfile.model_validate_json(row[0]) for row in rows]

    def close(self) -> None:
        with self._lock:
            self._conn.close()
