"""Unit tests for per-user resume statistics."""

from datetime import date, datetime

import pytest

from texfolio.contexts.resumes.analytics import resume_stats
from texfolio.contexts.resumes.models import ResumeDocument


def _resume(created_at, skills=(), ats_score=None):
    resume = ResumeDocument.from_dict(
        {
            "personalInfo": {"fullName": "Jane Doe", "email": "jane@example.com"},
            "skills": [{"category": "All", "skills": list(skills)}] if skills else [],
            "atsScore": ats_score,
        }
    )
    resume.created_at = created_at
    return resume


@pytest.mark.unit
def test_empty():
    stats = resume_stats([], today=date(2025, 6, 15))

    assert stats.to_dict() == {"totalResumes": 0, "chartData": [], "topSkills": [], "avgAtsScore": 0}


@pytest.mark.unit
def test_chart_covers_current_and_previous_five_months():
    resumes = [
        _resume(datetime(2024, 12, 31)),  # outside the window
        _resume(datetime(2025, 1, 1)),
        _resume(datetime(2025, 1, 20)),
        _resume(datetime(2025, 4, 2)),
        _resume(datetime(2025, 6, 10)),
    ]
    stats = resume_stats(resumes, today=date(2025, 6, 15))

    assert stats.total_resumes == 5
    assert stats.chart_data == [
        {"name": "Jan 2025", "resumes": 2},
        {"name": "Apr 2025", "resumes": 1},
        {"name": "Jun 2025", "resumes": 1},
    ]


@pytest.mark.unit
def test_chart_window_crosses_year_boundary():
    resumes = [_resume(datetime(2024, 9, 30)), _resume(datetime(2024, 10, 1)), _resume(datetime(2025, 2, 1))]
    stats = resume_stats(resumes, today=date(2025, 3, 1))

    assert [point["name"] for point in stats.chart_data] == ["Oct 2024", "Feb 2025"]


@pytest.mark.unit
def test_top_skills_ties_keep_first_seen_order():
    resumes = [
        _resume(datetime(2025, 1, 1), skills=["Go", "Python", "SQL"]),
        _resume(datetime(2025, 1, 2), skills=["Python", "Rust", "Docker", "K8s", "SQL"]),
    ]
    stats = resume_stats(resumes, today=date(2025, 1, 31))

    assert stats.top_skills == [
        {"name": "Python", "count": 2},
        {"name": "SQL", "count": 2},
        {"name": "Go", "count": 1},
        {"name": "Rust", "count": 1},
        {"name": "Docker", "count": 1},
    ]


@pytest.mark.unit
def test_average_ats_score_ignores_unscored_and_rounds_half_up():
    resumes = [
        _resume(datetime(2025, 1, 1), ats_score=70),
        _resume(datetime(2025, 1, 1), ats_score=81),
        _resume(datetime(2025, 1, 1)),
    ]
    assert resume_stats(resumes, today=date(2025, 1, 31)).avg_ats_score == 76
