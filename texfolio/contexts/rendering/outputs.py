"""
Output retention for the render work directory.

Successful renders leave their PDF behind for the caller. Callers that stream the
bytes use ResumeRenderer.render_to_bytes() (deleted after reading); everything else
is removed here once it is older than a retention window.
"""

import time
from pathlib import Path
from typing import List, Optional

from texfolio.contexts.rendering.compiler import LATEX_ARTIFACTS
from texfolio.contexts.rendering.logger import _log_debug, _log_info, _log_warning

# Job files: the PDF plus anything a crashed render may have left behind
SWEPT_SUFFIXES = [".pdf", ".tex"] + LATEX_ARTIFACTS
JOB_FILE_PREFIX = "resume_"


def sweep_outputs(work_dir: Path, max_age_s: float, now: Optional[float] = None) -> List[Path]:
    """
    Delete job files in work_dir older than max_age_s seconds.

    Only files named like render jobs (resume_*.pdf, resume_*.tex, resume_*.aux, ...)
    are considered; anything else in the directory is left alone.

    Args:
        work_dir: Render work directory
        max_age_s: Files modified more than this many seconds ago are deleted
        now: Reference time (epoch seconds), defaults to time.time()

    Returns:
        Paths that were deleted
    """
    if max_age_s < 0:
        raise ValueError(f"max_age_s must be non-negative, got {max_age_s}")
    if not work_dir.is_dir():
        return []

    now = time.time() if now is None else now
    cutoff = now - max_age_s
    deleted = []

    for path in sorted(work_dir.glob(f"{JOB_FILE_PREFIX}*")):
        if not path.is_file() or path.suffix not in SWEPT_SUFFIXES:
            continue
        try:
            if path.stat().st_mtime >= cutoff:
                continue
            path.unlink()
        except FileNotFoundError:
            # Removed concurrently (e.g. by the render that owns it)
            continue
        except OSError as e:
            _log_warning(f"Could not remove {path}: {e}")
            continue
        _log_debug(f"Swept {path.name}")
        deleted.append(path)

    _log_info(f"Swept {len(deleted)} stale files from {work_dir}")
    return deleted
