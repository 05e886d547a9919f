"""
Resume PDF renderer.

Turns a ResumeDocument into a compiled PDF:

    prepare work dir -> resolve template -> transform + merge -> write <job>.tex
    -> compile -> verify <job>.pdf -> clean up job files -> return PDF path

Every render gets its own job id, so concurrent renders in the same work
directory never share a file. Cleanup runs whether the render succeeded or not;
only the PDF of a successful render is left behind.
"""

import secrets
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from texfolio.contexts.rendering.compiler import (
    LATEX_ARTIFACTS,
    Compiler,
    LatexCompiler,
    parse_latex_log,
)
from texfolio.contexts.rendering.config import RenderConfig
from texfolio.contexts.rendering.exceptions import CompileFailure
from texfolio.contexts.rendering.logger import (
    _log_debug,
    _log_warning,
    log_render_result,
    log_render_start,
)
from texfolio.contexts.resumes.models import ResumeDocument
from texfolio.contexts.templating import TemplateStore, transform
from texfolio.utils.event_logging import log_render_event
from texfolio.utils.timestamp import now_ms


def new_job_id() -> str:
    """Job id of the form resume_<epoch-ms>_<8 hex chars>."""
    return f"resume_{now_ms()}_{secrets.token_hex(4)}"


@dataclass
class RenderJob:
    """
    One render request and the files it owns.

    Attributes:
        job_id: Unique identifier, also the stem of every job file
        placeholders: Transformed resume data the template was merged with
        template_id: Resolved template identifier
        source_path: Merged LaTeX source ({work_dir}/{job_id}.tex)
        output_path: Expected PDF ({work_dir}/{job_id}.pdf)
        artifact_paths: Auxiliary files the compiler may create
        latex: Merged LaTeX source text
    """

    job_id: str
    placeholders: Dict[str, Any]
    template_id: str
    source_path: Path
    output_path: Path
    artifact_paths: List[Path] = field(default_factory=list)
    latex: str = ""

    @classmethod
    def create(
        cls, work_dir: Path, template_id: str, placeholders: Dict[str, Any], latex: str = ""
    ) -> "RenderJob":
        job_id = new_job_id()
        return cls(
            job_id=job_id,
            placeholders=placeholders,
            template_id=template_id,
            source_path=work_dir / f"{job_id}.tex",
            output_path=work_dir / f"{job_id}.pdf",
            artifact_paths=[work_dir / f"{job_id}{ext}" for ext in LATEX_ARTIFACTS],
            latex=latex,
        )

    @property
    def log_path(self) -> Path:
        return self.source_path.with_suffix(".log")


class ResumeRenderer:
    """Renders resumes to PDF with a LaTeX template and an injected compiler."""

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        compiler: Optional[Compiler] = None,
        template_store: Optional[TemplateStore] = None,
    ):
        """
        Args:
            config: Render configuration (default: RenderConfig.from_env())
            compiler: Compiler to run (default: LatexCompiler built from config)
            template_store: Template lookup (default: store over config.templates_path)
        """
        self.config = config or RenderConfig.from_env()
        self.compiler = compiler or LatexCompiler(
            executable=self.config.latex_compiler,
            timeout_s=self.config.compile_timeout_s,
            num_passes=self.config.num_passes,
        )
        self.template_store = template_store or TemplateStore(self.config.templates_path)

    @property
    def work_dir(self) -> Path:
        return self.config.work_dir

    def prepare(self, resume: ResumeDocument) -> RenderJob:
        """
        Resolve the template and merge the resume into it, without touching disk.

        Raises:
            TemplateNotFoundError: If the resume's template id cannot be resolved
            TemplateRenderError: If merging fails
        """
        source = self.template_store.resolve(resume.template_id)
        placeholders = transform(resume)
        latex = self.template_store.merge(source, placeholders)
        return RenderJob.create(self.work_dir.resolve(), source.template_id, placeholders, latex)

    async def render(self, resume: ResumeDocument) -> Path:
        """
        Render a resume to PDF.

        Args:
            resume: Validated resume document

        Returns:
            Absolute path to the compiled PDF inside the work directory

        Raises:
            TemplateNotFoundError: Unknown template (nothing is written)
            TemplateRenderError: Template could not be merged (nothing is written)
            CompilerNotFoundError: Compiler executable missing
            CompileFailure: Compilation produced no PDF or timed out
        """
        self.work_dir.mkdir(parents=True, exist_ok=True)
        job = self.prepare(resume)

        events_file = self.config.events_file
        log_render_start(job.job_id, job.template_id, job.source_path)
        log_render_event(events_file, "render_started", job.job_id, template_id=job.template_id)

        start_time = time.time()
        completed = False
        try:
            job.source_path.write_text(job.latex, encoding="utf-8")
            outcome = await self.compiler.compile(job.source_path, job.source_path.parent)
            elapsed = time.time() - start_time

            # Log must be read before cleanup removes it
            errors, warnings = self._read_diagnostics(job)

            # A killed compiler may have left a truncated PDF behind
            if outcome.timed_out or not job.output_path.exists():
                log_render_result(job.job_id, outcome, elapsed, errors=errors, warnings=warnings)
                log_render_event(
                    events_file,
                    "render_failed",
                    job.job_id,
                    template_id=job.template_id,
                    elapsed_s=round(elapsed, 3),
                    timed_out=outcome.timed_out,
                    returncode=outcome.returncode,
                    errors=errors[:10],
                )
                raise CompileFailure(
                    job.job_id,
                    errors=errors,
                    stdout=outcome.stdout,
                    stderr=outcome.stderr,
                    timed_out=outcome.timed_out,
                )

            log_render_result(
                job.job_id, outcome, elapsed, pdf_path=job.output_path, errors=errors, warnings=warnings
            )
            log_render_event(
                events_file,
                "render_completed",
                job.job_id,
                template_id=job.template_id,
                elapsed_s=round(elapsed, 3),
                warnings=len(warnings),
                pdf_path=str(job.output_path),
            )
            completed = True
            return job.output_path
        finally:
            if not self.config.keep_artifacts:
                self._cleanup(job)
            # Also reached on cancellation: never leave partial output
            if not completed:
                _remove(job.output_path)

    async def render_to_bytes(self, resume: ResumeDocument) -> bytes:
        """Render a resume and return the PDF bytes; the PDF file is deleted after reading."""
        pdf_path = await self.render(resume)
        try:
            return pdf_path.read_bytes()
        finally:
            _remove(pdf_path)

    def _read_diagnostics(self, job: RenderJob):
        try:
            log_content = job.log_path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return [], []
        return parse_latex_log(log_content)

    def _cleanup(self, job: RenderJob) -> None:
        """Remove the job's .tex and auxiliary files, leaving the PDF in place."""
        for path in [job.source_path, *job.artifact_paths]:
            _remove(path)
        _log_debug(f"Cleaned up job files for {job.job_id}")


def _remove(path: Path) -> None:
    """Best-effort delete; failures are logged, never raised."""
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        _log_warning(f"Could not remove {path}: {e}")
