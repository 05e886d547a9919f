"""
Staged resume review.

A review runs four stages in order (content, ats, format, impact). Each stage asks
the model for a 0-100 score plus one or more lists, and the results are combined
into a weighted final score and a short list of recommendations.

A stage whose reply cannot be parsed scores 0 with empty lists, so one bad reply
lowers the final score instead of aborting the whole review.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from texfolio.contexts.coaching.exceptions import CoachResponseError
from texfolio.contexts.coaching.logger import _log_warning
from texfolio.contexts.coaching.replies import parse_score, string_list
from texfolio.utils.llm import parse_object_response

RECOMMENDATIONS_PER_STAGE = 2
QUICK_SCORE_RECOMMENDATIONS = 3


@dataclass(frozen=True)
class ReviewStage:
    """
    Attributes:
        name: Stage key (also the prefix of its result key, e.g. "contentAnalysis")
        weight: Share of the final score
        list_fields: Lists the stage reports besides its score
        role: Who the model is asked to be
        checklist: What the reviewer is asked to evaluate
        recommend: Builds a recommendation from one item of list_fields[-1]
        uses_job_description: Whether the target job description goes into the prompt
    """

    name: str
    weight: float
    list_fields: Tuple[str, ...]
    role: str
    checklist: Tuple[str, ...]
    recommend: Callable[[str], str]
    uses_job_description: bool = False


STAGES = [
    ReviewStage(
        name="content",
        weight=0.30,
        list_fields=("feedback",),
        role="an expert resume content reviewer",
        checklist=(
            "Clarity and conciseness of descriptions",
            "Use of action verbs and quantifiable achievements",
            "Relevance and completeness of information",
            "Professional summary effectiveness",
        ),
        recommend=lambda item: f"Content: {item}",
    ),
    ReviewStage(
        name="ats",
        weight=0.25,
        list_fields=("keywords", "missing"),
        role="an ATS (Applicant Tracking System) expert",
        checklist=(
            "Keyword optimization",
            "Standard section headers",
            "Simple formatting compatibility",
            "Skills matching",
        ),
        recommend=lambda item: f'ATS: Add keyword "{item}"',
        uses_job_description=True,
    ),
    ReviewStage(
        name="format",
        weight=0.20,
        list_fields=("issues",),
        role="a resume formatting expert",
        checklist=(
            "Section organization and order",
            "Information hierarchy",
            "Consistency in formatting",
            "Length appropriateness",
        ),
        recommend=lambda item: f"Format: {item}",
    ),
    ReviewStage(
        name="impact",
        weight=0.25,
        list_fields=("suggestions",),
        role="a career coach analyzing resume impact",
        checklist=(
            "First impression strength",
            "Career progression clarity",
            "Unique value proposition",
            "Call-to-action effectiveness",
        ),
        recommend=lambda item: f"Impact: {item}",
    ),
]


def stage_prompt(stage: ReviewStage, resume_json: str, job_description: Optional[str] = None) -> str:
    checklist = "\n".join(f"{i}. {item}" for i, item in enumerate(stage.checklist, 1))
    job_context = ""
    if stage.uses_job_description and job_description:
        job_context = f"\n\nTarget Job Description:\n{job_description.strip()}"

    schema = ",\n".join(
        ['  "score": <number 0-100>'] + [f'  "{name}": ["...", ...]' for name in stage.list_fields]
    )
    return (
        f"You are {stage.role}. Evaluate this resume for:\n{checklist}{job_context}\n\n"
        f"RESUME DATA:\n{resume_json}\n\n"
        f"Respond with ONLY valid JSON:\n{{\n{schema}\n}}"
    )


@dataclass
class StageResult:
    name: str
    score: int = 0
    details: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, **self.details}


def parse_stage(stage: ReviewStage, text: str) -> StageResult:
    """Parse one stage reply; an unusable reply yields a zero-score result."""
    empty = StageResult(stage.name, 0, {name: [] for name in stage.list_fields})

    result = parse_object_response(text)
    if result is None:
        _log_warning(f"{stage.name} stage: no JSON object in reply, scoring 0")
        return empty
    try:
        score = parse_score(result, "score", f"{stage.name} review", text)
    except CoachResponseError as e:
        _log_warning(f"{stage.name} stage: {e}")
        return empty

    details = {name: string_list(result.get(name)) for name in stage.list_fields}
    return StageResult(stage.name, score, details)


@dataclass
class CoachingReport:
    """
    Attributes:
        final_score: Weighted score over every stage, 0-100
        stages: Stage results keyed by stage name, in review order
        recommendations: Top items from each stage, prefixed with the stage
    """

    final_score: int
    stages: Dict[str, StageResult]
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finalScore": self.final_score,
            "analysisResults": {f"{name}Analysis": result.to_dict() for name, result in self.stages.items()},
            "recommendations": self.recommendations,
        }

    def quick_score(self) -> Dict[str, Any]:
        """Condensed view: final score, ATS score and the first few recommendations."""
        ats = self.stages.get("ats")
        return {
            "score": self.final_score,
            "atsScore": ats.score if ats else 0,
            "topRecommendations": self.recommendations[:QUICK_SCORE_RECOMMENDATIONS],
        }


def synthesize(results: List[StageResult]) -> CoachingReport:
    by_name = {result.name: result for result in results}
    weighted = sum(stage.weight * by_name[stage.name].score for stage in STAGES if stage.name in by_name)

    recommendations = []
    for stage in STAGES:
        result = by_name.get(stage.name)
        if result is None:
            continue
        items = result.details.get(stage.list_fields[-1], [])
        recommendations.extend(stage.recommend(item) for item in items[:RECOMMENDATIONS_PER_STAGE])

    return CoachingReport(
        final_score=int(math.floor(weighted + 0.5)),
        stages=by_name,
        recommendations=recommendations,
    )
