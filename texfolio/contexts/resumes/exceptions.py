"""Exceptions raised by the resumes context."""

from typing import List


class InvalidResumeError(ValueError):
    """
    Raised when resume data fails validation.

    Attributes:
        problems: Every validation problem found, in field order
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid resume data:\n" + "\n".join(f"  - {p}" for p in self.problems))


class InvalidResumeIdError(ValueError):
    """Raised when a resume id is not a well-formed identifier."""

    def __init__(self, resume_id: str):
        self.resume_id = resume_id
        super().__init__(f"Invalid resume ID: {resume_id!r}")


class ResumeNotFoundError(LookupError):
    """Raised when no resume matches the id (and owner) or share id."""

    def __init__(self, resume_id: str, message: str = "Resume not found"):
        self.resume_id = resume_id
        super().__init__(f"{message}: {resume_id}")


class LinkedInImportError(ValueError):
    """Raised when a LinkedIn profile PDF cannot be turned into resume data."""
