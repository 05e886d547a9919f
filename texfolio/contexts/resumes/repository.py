"""
SQLite store for resume documents.

Each resume is kept as one JSON document (its camelCase API shape) per row, with
the fields that queries filter or sort on copied into indexed columns.
"""

import json
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from texfolio.contexts.resumes.models import ResumeDocument

MEMORY_DB = ":memory:"


def new_resume_id() -> str:
    """32-character lowercase hex identifier."""
    return uuid.uuid4().hex


class ResumeRepository:
    """
    Persistent store of ResumeDocuments keyed by id and owner.

    The repository does not validate ownership rules beyond filtering on user_id;
    callers (ResumeService) decide what a missing row means.
    """

    def __init__(self, db_path: Union[Path, str]):
        """
        Open (and create if needed) the database at db_path.

        Args:
            db_path: SQLite file path, or ":memory:" for a private in-memory store
        """
        self.db_path = db_path
        if str(db_path) != MEMORY_DB:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row  # Enable column access by name
        self._create_schema()

    @classmethod
    def in_memory(cls) -> "ResumeRepository":
        return cls(MEMORY_DB)

    def _create_schema(self) -> None:
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS resumes (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                share_id TEXT UNIQUE,
                is_public INTEGER NOT NULL DEFAULT 0,
                ats_score INTEGER,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                document TEXT NOT NULL
            )
        """
        )
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_user_id ON resumes(user_id)")
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_share_id ON resumes(share_id)")
        self.conn.commit()

    def _row_to_resume(self, row: Optional[sqlite3.Row]) -> Optional[ResumeDocument]:
        if row is None:
            return None
        return ResumeDocument.from_dict(json.loads(row["document"]))

    def _columns(self, resume: ResumeDocument) -> tuple:
        return (
            resume.user_id,
            resume.share_id,
            int(resume.is_public),
            resume.ats_score,
            resume.created_at.isoformat(),
            resume.updated_at.isoformat(),
            json.dumps(resume.to_dict()),
        )

    def insert(self, resume: ResumeDocument) -> ResumeDocument:
        """
        Store a new resume, assigning its id and timestamps.

        Args:
            resume: Document with user_id set; id and timestamps are overwritten

        Returns:
            The stored document
        """
        if not resume.user_id:
            raise ValueError("Cannot store a resume without a user_id")

        stamp = datetime.now()
        resume.id = new_resume_id()
        resume.created_at = stamp
        resume.updated_at = stamp

        self.conn.execute(
            """
            INSERT INTO resumes (user_id, share_id, is_public, ats_score, created_at, updated_at, document, id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
            self._columns(resume) + (resume.id,),
        )
        self.conn.commit()
        return resume

    def get(self, resume_id: str, user_id: str) -> Optional[ResumeDocument]:
        """Resume with this id owned by user_id, or None."""
        row = self.conn.execute(
            "SELECT document FROM resumes WHERE id = ? AND user_id = ?", (resume_id, user_id)
        ).fetchone()
        return self._row_to_resume(row)

    def get_public(self, share_id: str) -> Optional[ResumeDocument]:
        """Public resume with this share id, or None (also None once made private)."""
        row = self.conn.execute(
            "SELECT document FROM resumes WHERE share_id = ? AND is_public = 1", (share_id,)
        ).fetchone()
        return self._row_to_resume(row)

    def list_for_user(self, user_id: str) -> List[ResumeDocument]:
        """All resumes owned by user_id, newest first."""
        rows = self.conn.execute(
            "SELECT document FROM resumes WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
            (user_id,),
        ).fetchall()
        return [self._row_to_resume(row) for row in rows]

    def replace(self, resume: ResumeDocument) -> ResumeDocument:
        """
        Overwrite a stored resume (matched on id and user_id), bumping updated_at.

        Raises:
            LookupError: If no row matches
        """
        resume.updated_at = datetime.now()
        cursor = self.conn.execute(
            """
            UPDATE resumes
            SET user_id = ?, share_id = ?, is_public = ?, ats_score = ?,
                created_at = ?, updated_at = ?, document = ?
            WHERE id = ? AND user_id = ?
        """,
            self._columns(resume) + (resume.id, resume.user_id),
        )
        self.conn.commit()
        if cursor.rowcount == 0:
            raise LookupError(f"No stored resume {resume.id} for user {resume.user_id}")
        return resume

    def delete(self, resume_id: str, user_id: str) -> bool:
        """Delete a resume; returns whether a row was removed."""
        cursor = self.conn.execute(
            "DELETE FROM resumes WHERE id = ? AND user_id = ?", (resume_id, user_id)
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def close(self) -> None:
        """Close database connection."""
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
