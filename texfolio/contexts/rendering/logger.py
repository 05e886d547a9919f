"""
Rendering context logger.

Provides logging interface for the rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from texfolio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Optional[Path] = None, latex_compiler: str = "pdflatex") -> Optional[Path]:
    """
    Setup logger for the rendering context.

    Args:
        log_dir: Directory for render.log, or None for console only
        latex_compiler: Compiler recorded in the provenance header

    Returns:
        Path to log file (None when console only)
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"LaTeX compiler": latex_compiler},
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(job_id: str, template_id: str, source_path: Path) -> None:
    """Log start of a render job."""
    _log_info(f"Starting render {job_id} (template: {template_id})")
    _log_debug(f"  Source: {source_path}")


def log_render_result(
    job_id: str,
    outcome,  # CompileOutcome
    elapsed_time: float,
    pdf_path: Optional[Path] = None,
    errors: Optional[list] = None,
    warnings: Optional[list] = None,
) -> None:
    """
    Log the outcome of a render job with diagnostics.

    Args:
        job_id: Render job identifier
        outcome: CompileOutcome from the compiler
        elapsed_time: Seconds spent compiling
        pdf_path: Output PDF when the render succeeded, None otherwise
        errors: Errors parsed from the compiler log
        warnings: Warnings parsed from the compiler log
    """
    errors = errors or []
    warnings = warnings or []

    if pdf_path is not None:
        _log_success(f"{job_id}: compiled with {len(warnings)} warnings ({elapsed_time:.2f}s)")
        if outcome.returncode not in (0, None):
            _log_debug(f"  Compiler exited {outcome.returncode} but produced a PDF")
        _log_debug(f"  PDF: {pdf_path}")
    else:
        reason = "timed out" if outcome.timed_out else "no PDF produced"
        _log_error(f"{job_id}: compilation failed, {reason} ({elapsed_time:.2f}s)")
        for i, err in enumerate(errors[:5], 1):
            _log_error(f"  Error {i}: {err}")
        if len(errors) > 5:
            _log_error(f"  ... and {len(errors) - 5} more errors")

    for i, warn in enumerate(warnings[:3], 1):
        _log_debug(f"  Warning {i}: {warn}")

    # Full compiler output on failure only; raw bypasses the line format
    if pdf_path is None:
        if outcome.stdout:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nCOMPILER STDOUT:\n{'=' * 80}\n{outcome.stdout}\n"
            )
        if outcome.stderr:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nCOMPILER STDERR:\n{'=' * 80}\n{outcome.stderr}\n"
            )
