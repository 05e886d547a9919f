"""
Resume Document Structure

Structured representation of a resume as stored and edited through the API.
Rendering consumes ResumeDocument instances read-only.

The API speaks camelCase (personalInfo.fullName); attributes here are snake_case.
from_dict() accepts either spelling and to_dict() produces camelCase.
"""

import re
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from omegaconf import OmegaConf

from texfolio.contexts.resumes.exceptions import InvalidResumeError

DEFAULT_TEMPLATE_ID = "classic"
DEFAULT_TITLE = "My Resume"
DEFAULT_PRIMARY_COLOR = "#2563EB"
FONT_FAMILIES = ("serif", "sans")

DEFAULT_SECTION_ORDER = [
    "summary",
    "experience",
    "education",
    "skills",
    "projects",
    "certifications",
]

MAX_TITLE_LENGTH = 100
MAX_SUMMARY_LENGTH = 2000

# Fields owned by the system, never taken from a client update
SYSTEM_FIELDS = {"id", "user_id", "ats_score", "share_id", "created_at", "updated_at"}

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(key: str) -> str:
    """fullName -> full_name (snake_case keys pass through unchanged)."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def to_camel(key: str) -> str:
    """full_name -> fullName"""
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _snake_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {to_snake(str(k)): v for k, v in data.items()}


def _camel_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(k): _camel_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camel_keys(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value if v is not None]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


def _entry(cls, data: Any):
    """Build an entry dataclass from a mapping, ignoring unknown keys."""
    if not isinstance(data, Mapping):
        raise InvalidResumeError([f"{cls.__name__} entry must be a mapping, got {type(data).__name__}"])
    known = {f.name for f in fields(cls)}
    values = {k: v for k, v in _snake_keys(data).items() if k in known}
    return cls(**values)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise InvalidResumeError([f"Invalid timestamp: {value!r}"]) from None


@dataclass
class PersonalInfo:
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: Optional[str] = None
    github: Optional[str] = None
    portfolio: Optional[str] = None

    def __post_init__(self):
        self.full_name = self.full_name or ""
        self.email = self.email or ""
        self.phone = self.phone or ""
        self.location = self.location or ""


@dataclass
class Experience:
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    description: List[str] = field(default_factory=list)
    location: Optional[str] = None

    def __post_init__(self):
        self.description = _as_str_list(self.description)


@dataclass
class Education:
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: Optional[str] = None
    location: Optional[str] = None


@dataclass
class Project:
    name: str = ""
    description: Optional[str] = None
    technologies: List[str] = field(default_factory=list)
    source_code: Optional[str] = None
    live_url: Optional[str] = None
    # Older documents stored repository and demo links under these keys
    github: Optional[str] = None
    link: Optional[str] = None

    def __post_init__(self):
        self.technologies = _as_str_list(self.technologies)
        self.source_code = self.source_code or self.github
        self.live_url = self.live_url or self.link


@dataclass
class SkillCategory:
    category: str = ""
    skills: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.skills = _as_str_list(self.skills)


@dataclass
class Certification:
    name: str = ""
    issuer: Optional[str] = None
    date: Optional[str] = None


@dataclass
class Customization:
    primary_color: str = DEFAULT_PRIMARY_COLOR
    font_family: str = "serif"


@dataclass
class ResumeDocument:
    """
    A complete resume.

    Lists are kept in stored order; nothing downstream reorders entries.
    section_order only controls the order of whole sections in a template.
    """

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    id: Optional[str] = None
    user_id: Optional[str] = None
    title: str = DEFAULT_TITLE
    template_id: str = DEFAULT_TEMPLATE_ID
    summary: Optional[str] = None
    experience: List[Experience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    skills: List[SkillCategory] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    section_order: List[str] = field(default_factory=lambda: list(DEFAULT_SECTION_ORDER))
    customization: Customization = field(default_factory=Customization)
    ats_score: Optional[int] = None
    is_public: bool = False
    share_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResumeDocument":
        """
        Build and validate a resume from API-shaped data.

        Args:
            data: Mapping with camelCase or snake_case keys; "_id" is accepted for id

        Returns:
            Validated ResumeDocument

        Raises:
            InvalidResumeError: If the data is malformed or fails validation
        """
        if not isinstance(data, Mapping):
            raise InvalidResumeError(["Resume must be a mapping"])

        raw = _snake_keys(data)
        if "_id" in raw and "id" not in raw:
            raw["id"] = raw.pop("_id")

        certifications = [
            Certification(name=c) if isinstance(c, str) else _entry(Certification, c)
            for c in raw.get("certifications") or []
        ]

        resume = cls(
            personal_info=_entry(PersonalInfo, raw.get("personal_info") or {}),
            id=_optional_str(raw.get("id")),
            user_id=_optional_str(raw.get("user_id")),
            title=raw.get("title") or DEFAULT_TITLE,
            template_id=raw.get("template_id") or DEFAULT_TEMPLATE_ID,
            summary=_optional_str(raw.get("summary")),
            experience=[_entry(Experience, e) for e in raw.get("experience") or []],
            education=[_entry(Education, e) for e in raw.get("education") or []],
            projects=[_entry(Project, p) for p in raw.get("projects") or []],
            skills=[_entry(SkillCategory, s) for s in raw.get("skills") or []],
            certifications=certifications,
            languages=_as_str_list(raw.get("languages")),
            section_order=_as_str_list(raw.get("section_order")) or list(DEFAULT_SECTION_ORDER),
            customization=_entry(Customization, raw.get("customization") or {}),
            ats_score=raw.get("ats_score"),
            is_public=bool(raw.get("is_public", False)),
            share_id=_optional_str(raw.get("share_id")),
            created_at=_parse_datetime(raw.get("created_at")),
            updated_at=_parse_datetime(raw.get("updated_at")),
        )

        problems = resume.validate()
        if problems:
            raise InvalidResumeError(problems)
        return resume

    @classmethod
    def from_yaml(cls, path: Path) -> "ResumeDocument":
        """Load a resume from a YAML (or JSON) file."""
        data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
        return cls.from_dict(data)

    def validate(self) -> List[str]:
        """Return a list of validation problems (empty when valid)."""
        problems = []
        info = self.personal_info

        if not info.full_name.strip():
            problems.append("personalInfo.fullName is required")
        if not info.email.strip():
            problems.append("personalInfo.email is required")
        elif not EMAIL_PATTERN.match(info.email.strip()):
            problems.append(f"personalInfo.email is not a valid email address: {info.email!r}")

        if not self.title.strip():
            problems.append("title is required")
        elif len(self.title) > MAX_TITLE_LENGTH:
            problems.append(f"title cannot exceed {MAX_TITLE_LENGTH} characters")

        if self.summary and len(self.summary) > MAX_SUMMARY_LENGTH:
            problems.append(f"summary cannot exceed {MAX_SUMMARY_LENGTH} characters")

        required_by_section = {
            "experience": ("company", "position"),
            "education": ("institution", "degree", "field"),
            "projects": ("name",),
            "skills": ("category",),
            "certifications": ("name",),
        }
        for section, required in required_by_section.items():
            for i, entry in enumerate(getattr(self, section)):
                for name in required:
                    if not str(getattr(entry, name) or "").strip():
                        problems.append(f"{section}[{i}].{to_camel(name)} is required")

        if self.customization.font_family not in FONT_FAMILIES:
            problems.append(
                f"customization.fontFamily must be one of {FONT_FAMILIES}, "
                f"got {self.customization.font_family!r}"
            )

        if self.ats_score is not None and (
            isinstance(self.ats_score, bool)
            or not isinstance(self.ats_score, (int, float))
            or not 0 <= self.ats_score <= 100
        ):
            problems.append(f"atsScore must be between 0 and 100, got {self.ats_score!r}")

        return problems

    def to_dict(self) -> Dict[str, Any]:
        """API-shaped (camelCase) representation."""
        data = asdict(self)
        for project in data["projects"]:
            project.pop("github", None)
            project.pop("link", None)
        return _camel_keys(data)

    def merged(self, updates: Mapping[str, Any]) -> "ResumeDocument":
        """
        Return a new validated document with a partial update applied.

        Top-level keys in updates replace the stored values wholesale; system
        fields (id, owner, share id, score, timestamps) are ignored.

        Raises:
            InvalidResumeError: If the updated document fails validation
        """
        base = asdict(self)
        for key, value in _snake_keys(updates).items():
            if key in SYSTEM_FIELDS or key == "_id":
                continue
            base[key] = value
        return ResumeDocument.from_dict(base)
