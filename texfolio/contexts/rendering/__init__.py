"""
Rendering Context

Responsibilities:
- Writes the merged LaTeX source for each render job
- Compiles LaTeX to PDF without blocking the event loop
- Verifies the PDF exists and reports compiler diagnostics when it does not
- Removes job files after every render and sweeps stale outputs

Owns: Render jobs, LaTeX compilation, the work directory
Never: Modifies template content or resume data
"""

from texfolio.contexts.rendering.compiler import CompileOutcome, Compiler, LatexCompiler
from texfolio.contexts.rendering.config import RenderConfig
from texfolio.contexts.rendering.exceptions import CompileFailure, CompilerNotFoundError, RenderError
from texfolio.contexts.rendering.outputs import sweep_outputs
from texfolio.contexts.rendering.renderer import RenderJob, ResumeRenderer

__all__ = [
    "ResumeRenderer",
    "RenderJob",
    "RenderConfig",
    "Compiler",
    "CompileOutcome",
    "LatexCompiler",
    "sweep_outputs",
    "RenderError",
    "CompileFailure",
    "CompilerNotFoundError",
]
