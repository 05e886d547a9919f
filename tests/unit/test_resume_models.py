"""Unit tests for ResumeDocument parsing and validation."""

from datetime import datetime

import pytest

from texfolio.contexts.resumes.exceptions import InvalidResumeError
from texfolio.contexts.resumes.models import DEFAULT_SECTION_ORDER, ResumeDocument, to_camel, to_snake


@pytest.mark.unit
def test_key_case_conversion():
    assert to_snake("fullName") == "full_name"
    assert to_snake("full_name") == "full_name"
    assert to_camel("source_code") == "sourceCode"
    assert to_camel("id") == "id"


@pytest.mark.unit
def test_defaults_are_filled(minimal_resume):
    assert minimal_resume.template_id == "classic"
    assert minimal_resume.title == "My Resume"
    assert minimal_resume.experience == []
    assert minimal_resume.section_order == DEFAULT_SECTION_ORDER
    assert minimal_resume.customization.primary_color == "#2563EB"
    assert minimal_resume.customization.font_family == "serif"
    assert minimal_resume.is_public is False


@pytest.mark.unit
def test_snake_case_keys_and_mongo_id_are_accepted():
    resume = ResumeDocument.from_dict(
        {
            "_id": "abc",
            "personal_info": {"full_name": "Jane Doe", "email": "jane@example.com"},
            "template_id": "premium",
        }
    )
    assert resume.id == "abc"
    assert resume.personal_info.full_name == "Jane Doe"
    assert resume.template_id == "premium"


@pytest.mark.unit
def test_legacy_project_links_are_mapped():
    resume = ResumeDocument.from_dict(
        {
            "personalInfo": {"fullName": "Jane Doe", "email": "jane@example.com"},
            "projects": [{"name": "p", "github": "https://github.com/j/p", "link": "https://p.dev"}],
        }
    )
    project = resume.projects[0]
    assert project.source_code == "https://github.com/j/p"
    assert project.live_url == "https://p.dev"

    exported = resume.to_dict()["projects"][0]
    assert "github" not in exported and "link" not in exported
    assert exported["sourceCode"] == "https://github.com/j/p"


@pytest.mark.unit
def test_every_problem_is_reported():
    with pytest.raises(InvalidResumeError) as exc_info:
        ResumeDocument.from_dict(
            {
                "title": "x" * 101,
                "personalInfo": {"fullName": "", "email": "not-an-email"},
                "summary": "s" * 2001,
                "experience": [{"company": "Acme"}],
                "customization": {"fontFamily": "comic"},
                "atsScore": 140,
            }
        )

    problems = exc_info.value.problems
    assert len(problems) == 7
    assert any("fullName" in p for p in problems)
    assert any("email" in p for p in problems)
    assert any("title" in p for p in problems)
    assert any("summary" in p for p in problems)
    assert any("experience[0].position" in p for p in problems)
    assert any("fontFamily" in p for p in problems)
    assert any("atsScore" in p for p in problems)


@pytest.mark.unit
def test_boolean_ats_score_is_rejected(minimal_resume_data):
    with pytest.raises(InvalidResumeError, match="atsScore"):
        ResumeDocument.from_dict({**minimal_resume_data, "atsScore": True})


@pytest.mark.unit
def test_invalid_resume_error_is_value_error():
    with pytest.raises(ValueError):
        ResumeDocument.from_dict({"personalInfo": {}})


@pytest.mark.unit
@pytest.mark.parametrize("data", [None, [], "resume"])
def test_non_mapping_is_rejected(data):
    with pytest.raises(InvalidResumeError):
        ResumeDocument.from_dict(data)


@pytest.mark.unit
def test_to_dict_is_camel_case(full_resume):
    data = full_resume.to_dict()

    assert data["personalInfo"]["fullName"] == "Ada Lovelace"
    assert data["experience"][0]["startDate"] == "2020-01"
    assert data["customization"] == {"primaryColor": "#1e40af", "fontFamily": "sans"}
    assert data["sectionOrder"] == DEFAULT_SECTION_ORDER


@pytest.mark.unit
def test_to_dict_round_trips_timestamps(minimal_resume):
    minimal_resume.created_at = datetime(2025, 3, 1, 12, 30)
    restored = ResumeDocument.from_dict(minimal_resume.to_dict())
    assert restored.created_at == datetime(2025, 3, 1, 12, 30)


@pytest.mark.unit
def test_merged_applies_partial_update(full_resume):
    full_resume.id = "keep-me"
    updated = full_resume.merged({"title": "New title", "summary": None, "id": "hijack", "atsScore": 99})

    assert updated.title == "New title"
    assert updated.summary is None
    assert updated.id == "keep-me"
    assert updated.ats_score is None
    assert updated.experience == full_resume.experience
    assert full_resume.title == "Backend roles"


@pytest.mark.unit
def test_merged_validates(full_resume):
    with pytest.raises(InvalidResumeError):
        full_resume.merged({"personalInfo": {"fullName": "No Email"}})


@pytest.mark.unit
def test_from_yaml(tmp_path):
    path = tmp_path / "resume.yaml"
    path.write_text(
        "personalInfo:\n"
        "  fullName: Jane Doe\n"
        "  email: jane@example.com\n"
        "skills:\n"
        "  - category: Languages\n"
        "    skills: [Python, Go]\n"
    )
    resume = ResumeDocument.from_yaml(path)

    assert resume.personal_info.full_name == "Jane Doe"
    assert resume.skills[0].skills == ["Python", "Go"]
