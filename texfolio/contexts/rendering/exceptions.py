"""Exceptions raised by the rendering context."""

from typing import List, Optional


class RenderError(Exception):
    """Base class for failures while producing a PDF."""


class CompilerNotFoundError(RenderError):
    """Raised when the LaTeX compiler executable cannot be started."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(
            f"LaTeX compiler not found: {executable!r}. "
            "Install TeX Live / MiKTeX or set TEXFOLIO_LATEX_COMPILER."
        )


class CompileFailure(RenderError):
    """
    Raised when compilation finished but produced no PDF.

    Attributes:
        job_id: Render job identifier
        errors: Errors parsed from the compiler log
        stdout: Compiler standard output (all passes)
        stderr: Compiler standard error (all passes)
        timed_out: Whether the compiler was killed for exceeding its time limit
    """

    # Characters of compiler output included in the message when no errors were parsed
    OUTPUT_TAIL_CHARS = 2000

    def __init__(
        self,
        job_id: str,
        errors: Optional[List[str]] = None,
        stdout: str = "",
        stderr: str = "",
        timed_out: bool = False,
    ):
        self.job_id = job_id
        self.errors = list(errors or [])
        self.stdout = stdout
        self.stderr = stderr
        self.timed_out = timed_out

        reason = "compiler timed out" if timed_out else "no PDF was produced"
        parts = [f"PDF generation failed for job {job_id}: {reason}"]

        if self.errors:
            parts.append("Errors:")
            parts.extend(f"  {error}" for error in self.errors[:10])
            if len(self.errors) > 10:
                parts.append(f"  ... and {len(self.errors) - 10} more errors")
        else:
            output = (stderr.strip() or stdout.strip())[-self.OUTPUT_TAIL_CHARS :]
            if output:
                parts.append(f"Compiler output:\n{output}")

        super().__init__("\n".join(parts))
