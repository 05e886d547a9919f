"""
Integration tests for LatexCompiler subprocess handling.

Uses small shell scripts as stand-in compilers so timeouts, exit codes and
missing executables are exercised without TeX installed.
"""

import asyncio
import os
import stat
import sys
from dataclasses import replace

import pytest
from loguru import logger

from texfolio.contexts.rendering.compiler import LatexCompiler
from texfolio.contexts.rendering.exceptions import CompileFailure, CompilerNotFoundError
from texfolio.contexts.rendering.renderer import ResumeRenderer

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh scripts as compilers")


def _script(tmp_path, body):
    path = tmp_path / "fake-latex"
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return str(path)


@pytest.mark.integration
@posix_only
def test_output_and_exit_code_are_captured(tmp_path):
    executable = _script(tmp_path, 'echo "pass on $4"; echo oops >&2; exit 1')
    source = tmp_path / "resume_1.tex"
    source.write_text("x")

    outcome = asyncio.run(LatexCompiler(executable, timeout_s=10, num_passes=3).compile(source, tmp_path))

    assert outcome.returncode == 1
    assert outcome.timed_out is False
    assert f"pass on {source}" in outcome.stdout
    assert "oops" in outcome.stderr
    # A failing pass stops further passes
    assert outcome.stdout.count("pass on") == 1


@pytest.mark.integration
@posix_only
def test_all_passes_run_on_success(tmp_path):
    executable = _script(tmp_path, "echo pass")
    source = tmp_path / "resume_1.tex"
    source.write_text("x")

    outcome = asyncio.run(LatexCompiler(executable, timeout_s=10, num_passes=2).compile(source, tmp_path))

    assert outcome.returncode == 0
    assert outcome.stdout.count("pass") == 2


@pytest.mark.integration
@posix_only
def test_slow_compiler_is_killed(tmp_path):
    executable = _script(tmp_path, "exec sleep 30")
    source = tmp_path / "resume_1.tex"
    source.write_text("x")

    outcome = asyncio.run(LatexCompiler(executable, timeout_s=0.5).compile(source, tmp_path))

    assert outcome.timed_out is True
    assert outcome.returncode is not None  # reaped, not left running


@pytest.mark.integration
@posix_only
def test_sub_second_timeout_is_logged_exactly(tmp_path):
    executable = _script(tmp_path, "exec sleep 30")
    source = tmp_path / "resume_1.tex"
    source.write_text("x")
    messages = []
    sink_id = logger.add(messages.append, level="WARNING", format="{message}")

    try:
        asyncio.run(LatexCompiler(executable, timeout_s=0.5).compile(source, tmp_path))
    finally:
        logger.remove(sink_id)

    assert any("exceeded 0.5s" in str(m) for m in messages)


@pytest.mark.integration
@posix_only
def test_renderer_reports_timeout(tmp_path, render_config, minimal_resume):
    config = replace(render_config, latex_compiler=_script(tmp_path, "exec sleep 30"), compile_timeout_s=0.5)

    with pytest.raises(CompileFailure) as exc_info:
        asyncio.run(ResumeRenderer(config).render(minimal_resume))

    assert exc_info.value.timed_out is True
    assert os.listdir(config.work_dir) == []


@pytest.mark.integration
@posix_only
def test_timeout_discards_partially_written_pdf(tmp_path, render_config, minimal_resume):
    body = 'printf "%%PDF-1.5 trunc" > "${4%.tex}.pdf"; exec sleep 30'
    config = replace(render_config, latex_compiler=_script(tmp_path, body), compile_timeout_s=0.5)

    with pytest.raises(CompileFailure) as exc_info:
        asyncio.run(ResumeRenderer(config).render(minimal_resume))

    assert exc_info.value.timed_out is True
    assert os.listdir(config.work_dir) == []


@pytest.mark.integration
@posix_only
def test_timeout_on_later_pass_discards_earlier_pdf(tmp_path, render_config, minimal_resume):
    # First pass writes the PDF, the second one hangs
    body = 'pdf="${4%.tex}.pdf"; if [ -e "$pdf" ]; then exec sleep 30; fi; printf "%%PDF-1.5" > "$pdf"'
    config = replace(
        render_config, latex_compiler=_script(tmp_path, body), compile_timeout_s=0.5, num_passes=2
    )

    with pytest.raises(CompileFailure):
        asyncio.run(ResumeRenderer(config).render(minimal_resume))

    assert os.listdir(config.work_dir) == []


@pytest.mark.integration
def test_missing_executable(tmp_path):
    source = tmp_path / "resume_1.tex"
    source.write_text("x")
    compiler = LatexCompiler(str(tmp_path / "no-such-latex"))

    with pytest.raises(CompilerNotFoundError):
        asyncio.run(compiler.compile(source, tmp_path))


@pytest.mark.integration
def test_missing_executable_cleans_up_job_files(tmp_path, render_config, minimal_resume):
    config = replace(render_config, latex_compiler=str(tmp_path / "no-such-latex"))

    with pytest.raises(CompilerNotFoundError):
        asyncio.run(ResumeRenderer(config).render(minimal_resume))

    assert os.listdir(config.work_dir) == []
