"""Shared fixtures: sample resumes, a render config rooted in tmp_path, a fake compiler."""

from pathlib import Path

import pytest

from texfolio.contexts.rendering.compiler import CompileOutcome
from texfolio.contexts.rendering.config import RenderConfig
from texfolio.contexts.resumes.models import ResumeDocument
from texfolio.utils.llm import LLMProvider, LLMResponse


class FakeCompiler:
    """
    Stands in for pdflatex: writes (or withholds) <stem>.pdf plus the usual
    auxiliary files. The "PDF" is a copy of the merged source so tests can check
    which resume ended up in which output.
    """

    def __init__(self, produce_pdf=True, returncode=0, log_text="", timed_out=False, artifacts=(".aux", ".log", ".out")):
        self.produce_pdf = produce_pdf
        self.returncode = returncode
        self.log_text = log_text
        self.timed_out = timed_out
        self.artifacts = artifacts
        self.calls = []

    async def compile(self, source_path: Path, out_dir: Path) -> CompileOutcome:
        self.calls.append((source_path, out_dir))
        source = source_path.read_text(encoding="utf-8")

        for ext in self.artifacts:
            text = self.log_text if ext == ".log" else ""
            (out_dir / f"{source_path.stem}{ext}").write_text(text, encoding="utf-8")

        if self.produce_pdf:
            (out_dir / f"{source_path.stem}.pdf").write_bytes(b"%PDF-1.5\n" + source.encode("utf-8"))

        return CompileOutcome(
            returncode=None if self.timed_out else self.returncode,
            stdout="This is pdfTeX, Version 3.141592653",
            stderr="",
            timed_out=self.timed_out,
        )


class ScriptedProvider(LLMProvider):
    """Returns queued replies and records the prompts it was sent."""

    vendor = "scripted"
    transient_errors = (ConnectionError,)

    def __init__(self, *replies):
        super().__init__("test")
        self.replies = list(replies)
        self.prompts = []

    def _call_api(self, system_prompt, user_prompt, temperature):
        self.prompts.append((system_prompt, user_prompt, temperature))
        return LLMResponse(content=self.replies.pop(0), model=self.model, input_tokens=10, output_tokens=5)


@pytest.fixture
def fake_compiler():
    return FakeCompiler()


@pytest.fixture
def render_config(tmp_path):
    return RenderConfig(work_dir=tmp_path / "work", events_file=tmp_path / "events.jsonl")


@pytest.fixture
def minimal_resume_data():
    return {
        "personalInfo": {"fullName": "Jane Doe", "email": "jane@example.com"},
    }


@pytest.fixture
def minimal_resume(minimal_resume_data):
    return ResumeDocument.from_dict(minimal_resume_data)


@pytest.fixture
def full_resume_data():
    return {
        "title": "Backend roles",
        "templateId": "classic",
        "personalInfo": {
            "fullName": "Ada Lovelace",
            "email": "ada@example.com",
            "phone": "+44 20 7946 0000",
            "location": "London, UK",
            "linkedin": "https://linkedin.com/in/ada",
            "github": "https://github.com/ada",
        },
        "summary": "Engineer with 100% focus on R&D.",
        "experience": [
            {
                "company": "Analytical Engines Ltd",
                "position": "Lead Engineer",
                "location": "London",
                "startDate": "2020-01",
                "endDate": "Present",
                "description": ["Cut costs by 30%", "Shipped C# & F# services"],
            }
        ],
        "education": [
            {
                "institution": "University of London",
                "degree": "BSc",
                "field": "Mathematics",
                "startDate": "2012",
                "endDate": "2016",
                "gpa": "3.9",
            }
        ],
        "skills": [
            {"category": "Languages", "skills": ["Python", "C++", "SQL"]},
            {"category": "Tools", "skills": ["Docker", "Git"]},
        ],
        "projects": [
            {
                "name": "difference_engine",
                "description": "Polynomial tables",
                "technologies": ["Python", "NumPy"],
                "sourceCode": "https://github.com/ada/engine",
            }
        ],
        "certifications": [{"name": "AWS SAA", "issuer": "Amazon", "date": "2023"}],
        "languages": ["English", "French"],
        "customization": {"primaryColor": "#1e40af", "fontFamily": "sans"},
    }


@pytest.fixture
def full_resume(full_resume_data):
    return ResumeDocument.from_dict(full_resume_data)


@pytest.fixture
def make_compiler():
    """FakeCompiler factory for tests that need a non-default behavior."""
    return FakeCompiler


@pytest.fixture
def make_provider():
    """ScriptedProvider factory: make_provider(reply1, reply2, ...)."""
    return ScriptedProvider
