"""Unit tests for compiler command construction and log parsing."""

from pathlib import Path

import pytest

from texfolio.contexts.rendering.compiler import LatexCompiler, parse_latex_log
from texfolio.contexts.rendering.exceptions import CompileFailure

SAMPLE_LOG = r"""
This is pdfTeX, Version 3.141592653-2.6-1.40.25 (TeX Live 2023)
./resume_1.tex:42: Undefined control sequence.
l.42 \badmacro
! Missing $ inserted.
LaTeX Warning: Reference `sec:x' on page 1 undefined on input line 10.
Package hyperref Warning: Token not allowed in a PDF string.
Overfull \hbox (12.3pt too wide) in paragraph at lines 20--21
! Emergency stop.
"""


@pytest.mark.unit
def test_command_is_non_interactive():
    compiler = LatexCompiler("pdflatex")
    cmd = compiler.command(Path("/work/resume_1.tex"), Path("/work"))

    assert cmd[0] == "pdflatex"
    assert "-interaction=nonstopmode" in cmd
    assert "-output-directory=/work" in cmd
    assert cmd[-1] == "/work/resume_1.tex"


@pytest.mark.unit
def test_parse_latex_log():
    errors, warnings = parse_latex_log(SAMPLE_LOG)

    assert errors[0] == "Undefined control sequence."
    assert "Missing $ inserted." in errors
    assert "Emergency stop." in errors
    assert len(errors) == len(set(errors))
    assert len(warnings) == 3
    assert warnings[2] == "12.3pt too wide"


@pytest.mark.unit
def test_parse_clean_log():
    assert parse_latex_log("Output written on resume_1.pdf (1 page).") == ([], [])


@pytest.mark.unit
def test_compile_failure_message_lists_errors():
    failure = CompileFailure("resume_1_ab", errors=["Undefined control sequence."], stdout="noise")

    assert "resume_1_ab" in str(failure)
    assert "Undefined control sequence." in str(failure)
    assert "noise" not in str(failure)


@pytest.mark.unit
def test_compile_failure_message_falls_back_to_output_tail():
    failure = CompileFailure("resume_1_ab", stdout="x" * 5000 + "TAIL", timed_out=True)

    message = str(failure)
    assert "timed out" in message
    assert message.endswith("TAIL")
    assert len(message) < 2200
