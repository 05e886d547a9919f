"""
LaTeX Compilation Module

Runs the LaTeX compiler as a non-interactive subprocess without blocking the event
loop. The renderer only depends on the Compiler protocol, so tests can swap in a
fake that writes (or withholds) the expected PDF.

Contract: the exit code is best-effort (pdflatex exits non-zero on many warnings);
whether the PDF exists afterwards is what decides success.
"""

import asyncio
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from texfolio.contexts.rendering.exceptions import CompilerNotFoundError
from texfolio.contexts.rendering.logger import _log_debug, _log_warning

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out", ".toc"]


@dataclass
class CompileOutcome:
    """
    What a compiler run reported.

    Attributes:
        returncode: Exit status of the last pass (None if it never exited normally)
        stdout: Standard output from all passes
        stderr: Standard error from all passes
        timed_out: Whether a pass was killed for exceeding the time limit
    """

    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False


class Compiler(Protocol):
    async def compile(self, source_path: Path, out_dir: Path) -> CompileOutcome:
        """Compile source_path, writing every output file into out_dir."""
        ...


def _decode(output: Optional[bytes]) -> str:
    # Replace invalid UTF-8 bytes instead of crashing
    return (output or b"").decode("utf-8", errors="replace")


class LatexCompiler:
    """pdflatex (or a compatible engine) run through asyncio subprocesses."""

    def __init__(self, executable: str = "pdflatex", timeout_s: float = 60.0, num_passes: int = 1):
        self.executable = executable
        self.timeout_s = timeout_s
        self.num_passes = num_passes

    def command(self, source_path: Path, out_dir: Path) -> List[str]:
        return [
            self.executable,
            "-interaction=nonstopmode",
            "-file-line-error",
            f"-output-directory={out_dir}",
            str(source_path),
        ]

    async def compile(self, source_path: Path, out_dir: Path) -> CompileOutcome:
        """
        Run the compiler num_passes times (stopping early on a non-zero exit).

        Raises:
            CompilerNotFoundError: If the executable cannot be started
        """
        cmd = self.command(source_path, out_dir)
        all_stdout = []
        all_stderr = []
        returncode = None
        timed_out = False

        # Multiple passes only matter for cross-references, TOC and page numbers
        for pass_number in range(1, self.num_passes + 1):
            _log_debug(f"  Pass {pass_number}/{self.num_passes}: {' '.join(cmd)}")
            try:
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    cwd=out_dir,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except FileNotFoundError as e:
                raise CompilerNotFoundError(self.executable) from e

            try:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout_s)
            except asyncio.TimeoutError:
                timed_out = True
                stdout, stderr = b"", b""
                _log_warning(f"Compiler exceeded {self.timeout_s:g}s, killing pid {process.pid}")
            finally:
                # Also reached on cancellation: never leave an orphaned compiler behind
                if process.returncode is None:
                    process.kill()
                    await process.wait()

            all_stdout.append(_decode(stdout))
            all_stderr.append(_decode(stderr))
            returncode = process.returncode

            if timed_out or returncode != 0:
                break

        return CompileOutcome(
            returncode=returncode,
            stdout="\n".join(all_stdout),
            stderr="\n".join(all_stderr),
            timed_out=timed_out,
        )


def parse_latex_log(log_content: str) -> Tuple[List[str], List[str]]:
    """
    Parse a LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # "! Error message", or "file:line: message" with -file-line-error
    for match in re.finditer(r"^(?:! |[^\s:]+\.tex:\d+: )(.+)$", log_content, re.MULTILINE):
        message = match.group(1).strip()
        if message not in errors:
            errors.append(message)

    # Fatal conditions that are not always reported on an error line
    for pattern in (r"Emergency stop", r"File ended while scanning use of", r"Fatal error occurred"):
        match = re.search(rf"({pattern}.*?)$", log_content, re.MULTILINE)
        if match and match.group(1).strip() not in errors:
            errors.append(match.group(1).strip())

    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]
    for pattern in warning_patterns:
        for match in re.finditer(pattern, log_content, re.MULTILINE):
            warnings.append(match.group(1).strip())

    return errors, warnings
