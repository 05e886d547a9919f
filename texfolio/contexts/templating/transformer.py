"""
Placeholder mapping for resume templates.

transform() flattens a ResumeDocument into the dict a LaTeX template is rendered
with. Every free-text leaf is sanitized here, so templates can place values
verbatim. Absent optional values are None (not ""), which lets a template tell
"not given" apart from "given but empty".

Two views of the same data are produced:
- Flat keys plus has_* presence flags (experience, has_experience, ...)
- sections: whole sections in the resume's section_order, empty ones skipped
"""

from typing import Any, Dict, List, Optional

from texfolio.contexts.resumes.models import (
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECTION_ORDER,
    Certification,
    Education,
    Experience,
    Project,
    ResumeDocument,
    SkillCategory,
)
from texfolio.contexts.templating.sanitizer import sanitize, sanitize_color, sanitize_url

SECTION_TITLES = {
    "summary": "Professional Summary",
    "experience": "Experience",
    "education": "Education",
    "skills": "Technical Skills",
    "projects": "Projects",
    "certifications": "Certifications",
}


def _optional(value: Optional[str]) -> Optional[str]:
    """Sanitize an optional field, keeping absence as None."""
    if value is None or not str(value).strip():
        return None
    return sanitize(value)


def _inline(items: List[str]) -> str:
    return ", ".join(items)


def _experience(entry: Experience) -> Dict[str, Any]:
    return {
        "company": sanitize(entry.company),
        "position": sanitize(entry.position),
        "location": _optional(entry.location),
        "start_date": sanitize(entry.start_date),
        "end_date": sanitize(entry.end_date),
        "description": [sanitize(line) for line in entry.description],
    }


def _education(entry: Education) -> Dict[str, Any]:
    return {
        "institution": sanitize(entry.institution),
        "degree": sanitize(entry.degree),
        "field": sanitize(entry.field),
        "location": _optional(entry.location),
        "start_date": sanitize(entry.start_date),
        "end_date": sanitize(entry.end_date),
        "gpa": _optional(entry.gpa),
    }


def _skill_category(entry: SkillCategory) -> Dict[str, Any]:
    items = [sanitize(skill) for skill in entry.skills]
    return {
        "category": sanitize(entry.category),
        "items": items,
        "skills_inline": _inline(items),
    }


def _project(entry: Project) -> Dict[str, Any]:
    technologies = [sanitize(tech) for tech in entry.technologies]
    return {
        "name": sanitize(entry.name),
        "description": _optional(entry.description),
        "technologies": technologies,
        "technologies_inline": _inline(technologies),
        "source_code": sanitize_url(entry.source_code),
        "live_url": sanitize_url(entry.live_url),
    }


def _certification(entry: Certification) -> Dict[str, Any]:
    return {
        "name": sanitize(entry.name),
        "issuer": _optional(entry.issuer),
        "date": _optional(entry.date),
    }


def _ordered_sections(placeholders: Dict[str, Any], section_order: List[str]) -> List[Dict[str, Any]]:
    """Build section blocks in the requested order, skipping empty and unknown keys."""
    sections = []
    seen = set()
    for key in section_order or DEFAULT_SECTION_ORDER:
        if key in seen or key not in SECTION_TITLES:
            continue
        seen.add(key)
        if not placeholders[f"has_{key}"]:
            continue

        block = {"key": key, "title": SECTION_TITLES[key]}
        if key == "summary":
            block["text"] = placeholders["summary"]
        else:
            block["items"] = placeholders[key]
        sections.append(block)
    return sections


def transform(resume: ResumeDocument) -> Dict[str, Any]:
    """
    Map a resume onto template placeholders.

    Args:
        resume: Resume to render (validated upstream)

    Returns:
        Placeholder dict (see module docstring for its two views)
    """
    info = resume.personal_info
    customization = resume.customization

    placeholders: Dict[str, Any] = {
        "full_name": sanitize(info.full_name),
        "email": sanitize(info.email),
        "email_url": sanitize_url(info.email),
        "phone": sanitize(info.phone),
        "location": sanitize(info.location),
        "linkedin": _optional(info.linkedin),
        "linkedin_url": sanitize_url(info.linkedin),
        "github": _optional(info.github),
        "github_url": sanitize_url(info.github),
        "portfolio": _optional(info.portfolio),
        "portfolio_url": sanitize_url(info.portfolio),
        "summary": _optional(resume.summary),
        "experience": [_experience(e) for e in resume.experience],
        "education": [_education(e) for e in resume.education],
        "skills": [_skill_category(s) for s in resume.skills],
        "projects": [_project(p) for p in resume.projects],
        "certifications": [_certification(c) for c in resume.certifications],
        "languages": [sanitize(language) for language in resume.languages],
        "primary_color": sanitize_color(customization.primary_color, DEFAULT_PRIMARY_COLOR),
        "font_family": "sans" if customization.font_family == "sans" else "serif",
    }
    placeholders["is_sans"] = placeholders["font_family"] == "sans"

    placeholders["has_summary"] = placeholders["summary"] is not None
    for key in ("experience", "education", "skills", "projects", "certifications"):
        placeholders[f"has_{key}"] = bool(placeholders[key])

    placeholders["sections"] = _ordered_sections(placeholders, resume.section_order)
    return placeholders
