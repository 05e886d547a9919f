"""
Resume service: ownership-scoped CRUD, PDF generation and public sharing.

Every lookup is scoped to the owning user; a resume owned by someone else is
reported exactly like a missing one. Rendering errors are not caught here, so
callers can tell template, compiler and data problems apart.
"""

import re
import secrets
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from texfolio.contexts.resumes.analytics import ResumeStats, resume_stats
from texfolio.contexts.resumes.exceptions import (
    InvalidResumeError,
    InvalidResumeIdError,
    ResumeNotFoundError,
)
from texfolio.contexts.resumes.logger import _log_debug, _log_info
from texfolio.contexts.resumes.models import ResumeDocument
from texfolio.contexts.resumes.repository import ResumeRepository

RESUME_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")
SHARE_ID_LENGTH = 10
PUBLIC_URL_PREFIX = "/r/"
_FILENAME_UNSAFE = re.compile(r"[^\w\-]+")


def new_share_id() -> str:
    """10-character URL-safe identifier (A-Z, a-z, 0-9, '_' and '-')."""
    return secrets.token_urlsafe(SHARE_ID_LENGTH)[:SHARE_ID_LENGTH]


def pdf_filename(resume: ResumeDocument) -> str:
    """
    Download name for a resume's PDF.

    Examples:
        "Ada Lovelace" -> "Ada_Lovelace_Resume.pdf"
    """
    name = _FILENAME_UNSAFE.sub("_", resume.personal_info.full_name.strip()).strip("_")
    return f"{name}_Resume.pdf" if name else "Resume.pdf"


class ResumeService:
    """
    Application service over a ResumeRepository and a ResumeRenderer.

    The renderer is only needed for generate_pdf() and export_pdf().
    """

    def __init__(self, repository: ResumeRepository, renderer=None):
        self.repository = repository
        self.renderer = renderer

    def _require_renderer(self):
        if self.renderer is None:
            raise RuntimeError("ResumeService was created without a renderer; PDF generation is unavailable")
        return self.renderer

    def _check_id(self, resume_id: str) -> None:
        if not isinstance(resume_id, str) or not RESUME_ID_PATTERN.match(resume_id):
            raise InvalidResumeIdError(resume_id)

    def find_all(self, user_id: str) -> List[ResumeDocument]:
        """All of the user's resumes, newest first."""
        return self.repository.list_for_user(user_id)

    def find_by_id(self, resume_id: str, user_id: str) -> ResumeDocument:
        """
        Raises:
            InvalidResumeIdError: If resume_id is malformed
            ResumeNotFoundError: If the user owns no resume with this id
        """
        self._check_id(resume_id)
        resume = self.repository.get(resume_id, user_id)
        if resume is None:
            raise ResumeNotFoundError(resume_id)
        return resume

    def create(self, data: Mapping[str, Any], user_id: str) -> ResumeDocument:
        """
        Validate and store a new resume for user_id.

        System fields in data (id, owner, score, share id, timestamps) are ignored.

        Raises:
            InvalidResumeError: If data fails validation
        """
        if not data:
            raise InvalidResumeError(["Resume data is required"])
        resume = ResumeDocument().merged(data)
        resume.user_id = user_id
        resume = self.repository.insert(resume)
        _log_info(f"Created resume {resume.id} for user {user_id}")
        return resume

    def update(self, resume_id: str, user_id: str, data: Mapping[str, Any]) -> ResumeDocument:
        """
        Apply a partial update to one of the user's resumes.

        Raises:
            InvalidResumeIdError, ResumeNotFoundError, InvalidResumeError
        """
        current = self.find_by_id(resume_id, user_id)
        updated = current.merged(data)
        self.repository.replace(updated)
        _log_debug(f"Updated resume {resume_id}")
        return updated

    def delete(self, resume_id: str, user_id: str) -> ResumeDocument:
        """Delete one of the user's resumes and return it."""
        resume = self.find_by_id(resume_id, user_id)
        if not self.repository.delete(resume_id, user_id):
            raise ResumeNotFoundError(resume_id)
        _log_info(f"Deleted resume {resume_id}")
        return resume

    async def generate_pdf(self, resume_id: str, user_id: str) -> Path:
        """
        Render one of the user's resumes to PDF.

        Returns:
            Path to the PDF in the renderer's work directory (the caller owns it)
        """
        renderer = self._require_renderer()
        resume = self.find_by_id(resume_id, user_id)
        return await renderer.render(resume)

    async def export_pdf(self, resume_id: str, user_id: str) -> Tuple[str, bytes]:
        """
        Render one of the user's resumes and return (download filename, PDF bytes).

        The PDF file is removed once read.
        """
        renderer = self._require_renderer()
        resume = self.find_by_id(resume_id, user_id)
        pdf_bytes = await renderer.render_to_bytes(resume)
        return pdf_filename(resume), pdf_bytes

    def toggle_visibility(self, resume_id: str, user_id: str) -> Dict[str, Any]:
        """
        Flip a resume between private and public.

        A share id is created the first time the resume is made public and kept
        afterwards, so re-publishing restores the same link.

        Returns:
            {"isPublic": bool, "shareId": str or None, "url": "/r/<shareId>" or None}
        """
        resume = self.find_by_id(resume_id, user_id)
        resume.is_public = not resume.is_public
        if resume.is_public and not resume.share_id:
            resume.share_id = new_share_id()
        self.repository.replace(resume)

        _log_info(f"Resume {resume_id} is now {'public' if resume.is_public else 'private'}")
        return {
            "isPublic": resume.is_public,
            "shareId": resume.share_id,
            "url": f"{PUBLIC_URL_PREFIX}{resume.share_id}" if resume.is_public else None,
        }

    def get_public(self, share_id: str) -> ResumeDocument:
        """
        Raises:
            ResumeNotFoundError: If no public resume has this share id
        """
        resume = self.repository.get_public(share_id)
        if resume is None:
            raise ResumeNotFoundError(share_id, "Resume not found or private")
        return resume

    def record_ats_score(self, resume_id: str, user_id: str, score: int) -> ResumeDocument:
        """Store an ATS score (0-100) from an analysis run."""
        # bool is an int subclass, but True is not a score
        if isinstance(score, bool) or not isinstance(score, (int, float)) or not 0 <= score <= 100:
            raise InvalidResumeError([f"atsScore must be between 0 and 100, got {score!r}"])
        resume = self.find_by_id(resume_id, user_id)
        resume.ats_score = int(score)
        return self.repository.replace(resume)

    def stats(self, user_id: str, today=None) -> ResumeStats:
        """Dashboard statistics over the user's resumes."""
        return resume_stats(self.find_all(user_id), today=today)
