"""
Coaching Context

Responsibilities:
- Scores resumes for ATS readiness, alone or against a job description
- Runs a staged review (content, ATS, format, impact) with a weighted final score
- Drafts cover letters from a resume and a job description
- Rewrites text and suggests experience bullets

Owns: Prompts and parsing of model replies
Never: Stores resumes or renders PDFs
"""

from texfolio.contexts.coaching.coach import ATSCheck, ResumeAnalysis, ResumeCoach
from texfolio.contexts.coaching.exceptions import CoachResponseError
from texfolio.contexts.coaching.review import CoachingReport, StageResult

__all__ = [
    "ResumeCoach",
    "ResumeAnalysis",
    "ATSCheck",
    "CoachingReport",
    "StageResult",
    "CoachResponseError",
]
