"""
LinkedIn profile import.

LinkedIn's "Save to PDF" export becomes a resume in two steps: pdfplumber extracts
the text, then an LLM maps it onto the resume structure. Entries the model could
not fill in are dropped, and the rest is validated like any other resume data.
"""

import io
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import pdfplumber

from texfolio.contexts.resumes.exceptions import LinkedInImportError
from texfolio.contexts.resumes.logger import _log_debug, _log_info, _log_warning
from texfolio.contexts.resumes.models import ResumeDocument
from texfolio.utils.llm import LLMProvider, get_provider, parse_object_response

MIN_TEXT_LENGTH = 50
IMPORT_TITLE = "LinkedIn Import"
DEFAULT_SKILL_CATEGORY = "General"

# Entries missing any of these are dropped rather than failing the import
REQUIRED_ENTRY_FIELDS = {
    "experience": ("company", "position"),
    "education": ("institution", "degree", "field"),
    "projects": ("name",),
    "certifications": ("name",),
}

_EXTRACT_SYSTEM_PROMPT = """\
You are an expert resume parser. Extract ALL structured data from this LinkedIn PDF text.
Return ONLY valid JSON (no markdown code blocks) matching this structure:
{
  "personalInfo": {"fullName": "", "email": "", "phone": "", "location": "", "linkedin": "", "github": ""},
  "summary": "Full Summary/About section text",
  "experience": [{"company": "", "position": "", "location": "", "startDate": "Mon YYYY",
                  "endDate": "Present or Mon YYYY", "description": ["achievement", "..."]}],
  "education": [{"institution": "", "degree": "", "field": "", "startDate": "YYYY", "endDate": "YYYY"}],
  "skills": [{"category": "Languages, Frameworks, Tools, ...", "skills": ["Skill", "..."]}],
  "projects": [{"name": "", "description": "", "technologies": ["Tech"]}],
  "certifications": [{"name": "", "issuer": ""}]
}

Rules:
- Keep the full Summary/About text and every experience bullet point
- Group skills into categories
- Dates use "Mon YYYY" (e.g. "Aug 2025")"""


def extract_pdf_text(pdf: Union[Path, bytes]) -> str:
    """
    Extract the text of every page of a PDF.

    Args:
        pdf: Path to the PDF or its raw bytes

    Raises:
        LinkedInImportError: If the file cannot be read as a PDF
    """
    source = io.BytesIO(pdf) if isinstance(pdf, (bytes, bytearray)) else pdf
    try:
        with pdfplumber.open(source) as document:
            pages = [page.extract_text() or "" for page in document.pages]
    except Exception as e:  # pdfminer has no common base class for malformed-file errors
        raise LinkedInImportError("Failed to extract text from PDF") from e
    return "\n".join(pages).strip()


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _has_required(entry: Any, required) -> bool:
    return isinstance(entry, Mapping) and all(str(entry.get(name) or "").strip() for name in required)


def clean_profile_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Keep the resume fields of an extracted profile, dropping incomplete entries.

    Skill groups without a category are filed under "General".
    """
    info = data.get("personalInfo")
    cleaned: Dict[str, Any] = {
        "title": IMPORT_TITLE,
        "personalInfo": dict(info) if isinstance(info, Mapping) else {},
        "summary": data.get("summary"),
    }

    for section, required in REQUIRED_ENTRY_FIELDS.items():
        entries = _list(data.get(section))
        kept = [entry for entry in entries if _has_required(entry, required)]
        if len(kept) < len(entries):
            _log_warning(f"LinkedIn import: dropped {len(entries) - len(kept)} incomplete {section} entries")
        cleaned[section] = kept

    skills: List[Dict[str, Any]] = []
    for group in _list(data.get("skills")):
        if isinstance(group, Mapping) and group.get("skills"):
            skills.append({"category": group.get("category") or DEFAULT_SKILL_CATEGORY, "skills": group["skills"]})
    cleaned["skills"] = skills
    return cleaned


def import_linkedin_text(text: str, provider: Optional[LLMProvider] = None) -> ResumeDocument:
    """
    Turn extracted LinkedIn profile text into a validated resume.

    Raises:
        LinkedInImportError: If the text is too short or the reply has no JSON object
        InvalidResumeError: If the extracted data fails validation (e.g. no email)
    """
    if not text or len(text.strip()) < MIN_TEXT_LENGTH:
        raise LinkedInImportError("PDF appears to be empty or unreadable")

    provider = provider or get_provider()
    _log_info(f"Extracting LinkedIn profile with {provider.name} ({len(text)} chars)")
    response = provider.generate(
        _EXTRACT_SYSTEM_PROMPT,
        f"Start of PDF text:\n{text.strip()}\n-- End of PDF text --",
        temperature=0.0,
    )

    data = parse_object_response(response.content)
    if data is None:
        _log_debug(f"  Unparseable reply: {response.content[:200]!r}")
        raise LinkedInImportError("Failed to parse AI response")

    return ResumeDocument.from_dict(clean_profile_data(data))


def import_linkedin_pdf(pdf: Union[Path, bytes], provider: Optional[LLMProvider] = None) -> ResumeDocument:
    """Extract a LinkedIn profile PDF's text and import it (see import_linkedin_text)."""
    return import_linkedin_text(extract_pdf_text(pdf), provider)
