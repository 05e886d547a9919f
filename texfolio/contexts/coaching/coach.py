"""
LLM-backed resume coaching.

Each task is a system prompt plus a user prompt template filled with the resume's
API-shaped JSON. Replies are parsed leniently (code fences and surrounding prose
are tolerated) but a reply with no usable payload raises CoachResponseError.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from texfolio.contexts.coaching.exceptions import CoachResponseError
from texfolio.contexts.coaching.logger import _log_debug, _log_info, _log_success
from texfolio.contexts.coaching.replies import parse_score, string_list
from texfolio.contexts.coaching.review import (
    STAGES,
    CoachingReport,
    parse_stage,
    stage_prompt,
    synthesize,
)
from texfolio.contexts.resumes.models import SYSTEM_FIELDS, ResumeDocument, to_camel
from texfolio.utils.llm import (
    LLMProvider,
    get_provider,
    parse_array_response,
    parse_object_response,
    strip_code_fences,
)

IMPROVE_MODES = ("professional", "grammar")
DEFAULT_BULLET_COUNT = 5

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_JSON_SYSTEM_PROMPT = "You are a helpful assistant that outputs only valid JSON."

_ANALYZE_PROMPT_TEMPLATE = """\
Act as an expert Resume Reviewer and ATS (Applicant Tracking System) Specialist.
Analyze the following resume JSON and provide actionable feedback.

RESUME DATA:
{resume_json}

Output MUST be a valid JSON object with this exact structure:
{{
  "atsScore": number (0-100),
  "summaryFeedback": "string (2-3 sentences max)",
  "improvements": [
    {{"section": "string (e.g. Experience, Skills)", "tip": "string (concise actionable advice)"}}
  ]
}}

Do not include markdown ticks or explanations. Just return the raw JSON."""

_COVER_LETTER_SYSTEM_PROMPT = "You are a professional career coach."

_COVER_LETTER_PROMPT_TEMPLATE = """\
Act as a professional Resume Writer and Career Coach.
Write a compelling, professional cover letter based on the following resume and job description.
{target}
RESUME DATA:
{resume_json}

JOB DESCRIPTION:
{job_description}

REQUIREMENTS:
1. Tone: professional, confident, and tailored to the job.
2. Content: concrete connections between the candidate's experience and the job requirements.
3. Format: Markdown, standard cover letter layout (greeting, body, sign-off).
4. Length: 300-400 words.

Output ONLY the Markdown text of the cover letter. No preamble."""

_IMPROVE_SYSTEM_PROMPT = "You are an expert resume editor. Reply with the rewritten text only."

_IMPROVE_INSTRUCTIONS = {
    "professional": (
        "Rewrite the following resume text to sound more professional and impactful. "
        "Use strong action verbs and keep every fact unchanged."
    ),
    "grammar": (
        "Fix grammar, spelling and punctuation in the following resume text. "
        "Do not change its meaning or tone."
    ),
}

_ATS_CHECK_PROMPT_TEMPLATE = """\
Act as an ATS (Applicant Tracking System) scanner.
Score how well the following resume would pass automated screening{target}.

RESUME DATA:
{resume_json}
{job_section}
Output MUST be a valid JSON object with this exact structure:
{{
  "atsScore": number (0-100),
  "matchedKeywords": ["keyword found in the resume", ...],
  "missingKeywords": ["important keyword the resume lacks", ...],
  "suggestions": ["concise actionable fix", ...]
}}

Do not include markdown ticks or explanations. Just return the raw JSON."""

_REVIEW_SYSTEM_PROMPT = "You are a resume reviewer. Reply with valid JSON only."

_BULLETS_PROMPT_TEMPLATE = """\
Write {count} resume bullet points for a {job_title}.{skills_clause}
Each bullet starts with an action verb and, where plausible, includes a measurable result.

Return ONLY a JSON array of strings."""


def _resume_payload(resume: ResumeDocument) -> str:
    """Resume JSON for prompts, without storage and sharing fields."""
    data = resume.to_dict()
    for name in SYSTEM_FIELDS | {"is_public"}:
        data.pop(to_camel(name), None)
    return json.dumps(data, indent=2)


@dataclass
class ResumeAnalysis:
    """
    Attributes:
        ats_score: ATS readiness score, 0-100
        summary_feedback: Short overall assessment
        improvements: [{"section": ..., "tip": ...}]
    """

    ats_score: int
    summary_feedback: str = ""
    improvements: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "atsScore": self.ats_score,
            "summaryFeedback": self.summary_feedback,
            "improvements": self.improvements,
        }


def parse_analysis(text: str) -> ResumeAnalysis:
    """
    Parse an analysis reply.

    Raises:
        CoachResponseError: If the reply has no JSON object or no numeric atsScore
    """
    result = parse_object_response(text)
    if result is None:
        raise CoachResponseError("analyze", text)

    score = parse_score(result, "atsScore", "analyze", text)

    improvements = []
    for item in result.get("improvements") or []:
        if isinstance(item, dict) and item.get("tip"):
            improvements.append({"section": str(item.get("section") or "General"), "tip": str(item["tip"])})
        elif isinstance(item, str) and item.strip():
            improvements.append({"section": "General", "tip": item.strip()})

    return ResumeAnalysis(
        ats_score=score,
        summary_feedback=str(result.get("summaryFeedback") or "").strip(),
        improvements=improvements,
    )


@dataclass
class ATSCheck:
    """
    Attributes:
        ats_score: Screening score, 0-100 (against the job description when given)
        matched_keywords: Keywords the resume already contains
        missing_keywords: Keywords worth adding
        suggestions: Concrete fixes
    """

    ats_score: int
    matched_keywords: List[str] = field(default_factory=list)
    missing_keywords: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "atsScore": self.ats_score,
            "matchedKeywords": self.matched_keywords,
            "missingKeywords": self.missing_keywords,
            "suggestions": self.suggestions,
        }


def parse_ats_check(text: str) -> ATSCheck:
    """
    Raises:
        CoachResponseError: If the reply has no JSON object or no numeric atsScore
    """
    result = parse_object_response(text)
    if result is None:
        raise CoachResponseError("ATS check", text)

    return ATSCheck(
        ats_score=parse_score(result, "atsScore", "ATS check", text),
        matched_keywords=string_list(result.get("matchedKeywords")),
        missing_keywords=string_list(result.get("missingKeywords")),
        suggestions=string_list(result.get("suggestions")),
    )


class ResumeCoach:
    """Resume feedback and writing help from an LLM provider."""

    def __init__(self, provider: Optional[LLMProvider] = None):
        """
        Args:
            provider: LLM provider; defaults to get_provider() on first use, so a
                      coach can be built without API keys configured
        """
        self._provider = provider

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_provider()
        return self._provider

    def _generate(self, task: str, system_prompt: str, user_prompt: str, temperature: float) -> str:
        _log_info(f"Requesting {task} from {self.provider.name}")
        response = self.provider.generate(system_prompt, user_prompt, temperature=temperature)
        _log_debug(f"  {task}: {response.input_tokens} tokens in, {response.output_tokens} out")
        return response.content

    def analyze(self, resume: ResumeDocument) -> ResumeAnalysis:
        """
        Score a resume for ATS readiness and list improvements.

        Raises:
            CoachResponseError: If the reply cannot be parsed
        """
        user_prompt = _ANALYZE_PROMPT_TEMPLATE.format(resume_json=_resume_payload(resume))
        reply = self._generate("analysis", _JSON_SYSTEM_PROMPT, user_prompt, temperature=0.5)
        analysis = parse_analysis(reply)
        _log_success(f"Analysis complete: ATS score {analysis.ats_score}")
        return analysis

    def ats_check(self, resume: ResumeDocument, job_description: Optional[str] = None) -> ATSCheck:
        """
        Score a resume for automated screening, against a job description if given.

        Raises:
            CoachResponseError: If the reply cannot be parsed
        """
        job_section = ""
        target = ""
        if job_description and job_description.strip():
            job_section = f"\nJOB DESCRIPTION:\n{job_description.strip()}\n"
            target = " for the job description below"

        user_prompt = _ATS_CHECK_PROMPT_TEMPLATE.format(
            target=target, resume_json=_resume_payload(resume), job_section=job_section
        )
        reply = self._generate("ATS check", _JSON_SYSTEM_PROMPT, user_prompt, temperature=0.3)
        check = parse_ats_check(reply)
        _log_success(f"ATS check complete: {check.ats_score}, {len(check.missing_keywords)} missing keywords")
        return check

    def coach(self, resume: ResumeDocument, job_description: Optional[str] = None) -> CoachingReport:
        """
        Run the staged review (content, ats, format, impact) and combine the results.

        Stage replies that cannot be parsed score 0; provider errors propagate.
        """
        resume_json = _resume_payload(resume)
        results = []
        for stage in STAGES:
            user_prompt = stage_prompt(stage, resume_json, job_description)
            reply = self._generate(f"{stage.name} review", _REVIEW_SYSTEM_PROMPT, user_prompt, temperature=0.7)
            result = parse_stage(stage, reply)
            _log_debug(f"  {stage.name}: {result.score}/100")
            results.append(result)

        report = synthesize(results)
        _log_success(f"Review complete: final score {report.final_score}")
        return report

    def quick_score(self, resume: ResumeDocument, job_description: Optional[str] = None) -> Dict[str, Any]:
        """Staged review condensed to {"score", "atsScore", "topRecommendations"}."""
        return self.coach(resume, job_description).quick_score()

    def cover_letter(
        self,
        resume: ResumeDocument,
        job_description: str,
        job_title: Optional[str] = None,
        company: Optional[str] = None,
    ) -> str:
        """
        Draft a Markdown cover letter for a job.

        Raises:
            ValueError: If job_description is empty
            CoachResponseError: If the reply is empty
        """
        if not job_description or not job_description.strip():
            raise ValueError("Job description is required")

        target = ""
        if job_title or company:
            role = job_title or "the role"
            target = f"\nTARGET: {role} at {company}\n" if company else f"\nTARGET: {role}\n"

        user_prompt = _COVER_LETTER_PROMPT_TEMPLATE.format(
            target=target,
            resume_json=_resume_payload(resume),
            job_description=job_description.strip(),
        )
        letter = strip_code_fences(
            self._generate("cover letter", _COVER_LETTER_SYSTEM_PROMPT, user_prompt, temperature=0.7)
        )
        if not letter:
            raise CoachResponseError("cover letter", letter, "empty reply")
        return letter

    def improve_text(self, text: str, mode: str = "professional") -> str:
        """
        Rewrite a piece of resume text.

        Args:
            text: Text to rewrite
            mode: "professional" (stronger wording) or "grammar" (corrections only)
        """
        if not text or not text.strip():
            raise ValueError("Text is required")
        if mode not in IMPROVE_MODES:
            raise ValueError(f"Unknown improve mode: {mode}. Use one of {IMPROVE_MODES}")

        user_prompt = f"{_IMPROVE_INSTRUCTIONS[mode]}\n\nTEXT:\n{text.strip()}"
        improved = strip_code_fences(
            self._generate(f"{mode} rewrite", _IMPROVE_SYSTEM_PROMPT, user_prompt, temperature=0.3)
        )
        # Models sometimes quote the whole reply
        if len(improved) >= 2 and improved[0] == improved[-1] == '"':
            improved = improved[1:-1].strip()
        if not improved:
            raise CoachResponseError("improve", improved, "empty reply")
        return improved

    def generate_bullets(
        self, job_title: str, skills: Optional[List[str]] = None, count: int = DEFAULT_BULLET_COUNT
    ) -> List[str]:
        """Suggest experience bullets for a job title, optionally featuring skills."""
        if not job_title or not job_title.strip():
            raise ValueError("Job title is required")

        skills_clause = f" Feature these skills where relevant: {', '.join(skills)}." if skills else ""
        user_prompt = _BULLETS_PROMPT_TEMPLATE.format(
            count=count, job_title=job_title.strip(), skills_clause=skills_clause
        )
        reply = self._generate("bullets", _JSON_SYSTEM_PROMPT, user_prompt, temperature=0.7)
        bullets = [b.strip() for b in parse_array_response(reply, fallback_count=count) if b.strip()]
        if not bullets:
            raise CoachResponseError("bullets", reply, "no bullets in reply")
        return bullets[:count]
