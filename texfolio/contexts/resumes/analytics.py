"""
Per-user resume statistics for the dashboard.
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from texfolio.contexts.resumes.models import ResumeDocument
from texfolio.utils.timestamp import month_label

CHART_MONTHS = 6
TOP_SKILLS_LIMIT = 5


@dataclass
class ResumeStats:
    """
    Attributes:
        total_resumes: Number of resumes the user owns
        chart_data: [{"name": "Mon YYYY", "resumes": n}] for months with resumes,
                    oldest first, covering the current month and the five before it
        top_skills: [{"name": skill, "count": n}], most frequent first
        avg_ats_score: Rounded mean of recorded ATS scores (0 when none)
    """

    total_resumes: int = 0
    chart_data: List[Dict[str, Any]] = field(default_factory=list)
    top_skills: List[Dict[str, Any]] = field(default_factory=list)
    avg_ats_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalResumes": self.total_resumes,
            "chartData": self.chart_data,
            "topSkills": self.top_skills,
            "avgAtsScore": self.avg_ats_score,
        }


def _window_start(today: date, months: int) -> date:
    """First day of the month `months - 1` months before today's month."""
    index = today.year * 12 + (today.month - 1) - (months - 1)
    return date(index // 12, index % 12 + 1, 1)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def monthly_counts(resumes: Iterable[ResumeDocument], today: date, months: int = CHART_MONTHS) -> List[Dict[str, Any]]:
    start = _window_start(today, months)
    counts = Counter()
    for resume in resumes:
        if resume.created_at is None or resume.created_at.date() < start:
            continue
        counts[(resume.created_at.year, resume.created_at.month)] += 1

    return [
        {"name": month_label(month, year), "resumes": counts[(year, month)]}
        for year, month in sorted(counts)
    ]


def top_skills(resumes: Iterable[ResumeDocument], limit: int = TOP_SKILLS_LIMIT) -> List[Dict[str, Any]]:
    """Most frequent skills across every category; ties keep first-seen order."""
    counts = Counter(
        skill
        for resume in resumes
        for category in resume.skills
        for skill in category.skills
    )
    return [{"name": name, "count": count} for name, count in counts.most_common(limit)]


def average_ats_score(resumes: Iterable[ResumeDocument]) -> int:
    scores = [resume.ats_score for resume in resumes if resume.ats_score is not None]
    if not scores:
        return 0
    return _round_half_up(sum(scores) / len(scores))


def resume_stats(resumes: Iterable[ResumeDocument], today: Optional[date] = None) -> ResumeStats:
    """
    Aggregate dashboard statistics over one user's resumes.

    Args:
        resumes: The user's resumes
        today: Reference date for the monthly chart (default: today)

    Returns:
        ResumeStats
    """
    resumes = list(resumes)
    today = today or date.today()
    return ResumeStats(
        total_resumes=len(resumes),
        chart_data=monthly_counts(resumes, today),
        top_skills=top_skills(resumes),
        avg_ats_score=average_ats_score(resumes),
    )
