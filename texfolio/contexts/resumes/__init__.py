"""
Resumes Context

Responsibilities:
- Defines the resume document and its validation rules
- Imports resumes from LinkedIn profile PDFs
- Stores resumes per owner and shares them publicly by share id
- Aggregates per-user statistics

Owns: Resume data, ownership, visibility
Never: Knows about LaTeX or template syntax
"""

from texfolio.contexts.resumes.exceptions import (
    InvalidResumeError,
    InvalidResumeIdError,
    LinkedInImportError,
    ResumeNotFoundError,
)
from texfolio.contexts.resumes.models import (
    Certification,
    Customization,
    Education,
    Experience,
    PersonalInfo,
    Project,
    ResumeDocument,
    SkillCategory,
)

__all__ = [
    "ResumeDocument",
    "PersonalInfo",
    "Experience",
    "Education",
    "Project",
    "SkillCategory",
    "Certification",
    "Customization",
    "InvalidResumeError",
    "InvalidResumeIdError",
    "LinkedInImportError",
    "ResumeNotFoundError",
]
