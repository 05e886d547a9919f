"""
Coaching context logger.

Logging interface for LLM-backed resume feedback, with automatic [coach] prefix.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from texfolio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[coach]"


def setup_coaching_logger(log_dir: Optional[Path] = None, provider: str = "") -> Optional[Path]:
    """Setup logger for the coaching context, recording the LLM provider in the header."""
    return _setup_logger(
        context_name="coach",
        log_dir=log_dir,
        extra_provenance={"LLM provider": provider or "default"},
    )


def _log_info(message: str) -> None:
    """Log info message with [coach] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [coach] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [coach] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [coach] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [coach] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
