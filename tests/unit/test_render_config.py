"""Unit tests for RenderConfig."""

from pathlib import Path

import pytest

from texfolio.contexts.rendering.config import RenderConfig


@pytest.mark.unit
def test_defaults():
    config = RenderConfig()
    assert config.latex_compiler == "pdflatex"
    assert config.compile_timeout_s == 60.0
    assert config.num_passes == 1
    assert config.keep_artifacts is False
    assert config.events_file is None


@pytest.mark.unit
@pytest.mark.parametrize("kwargs", [{"num_passes": 0}, {"compile_timeout_s": 0}, {"compile_timeout_s": -1}])
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValueError):
        RenderConfig(**kwargs)


@pytest.mark.unit
def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TEXFOLIO_LATEX_COMPILER", "/opt/texlive/bin/pdflatex")
    monkeypatch.setenv("TEXFOLIO_WORK_DIR", str(tmp_path / "work"))
    monkeypatch.setenv("TEXFOLIO_COMPILE_TIMEOUT_S", "15")
    monkeypatch.setenv("TEXFOLIO_NUM_PASSES", "2")
    monkeypatch.setenv("TEXFOLIO_KEEP_LATEX_ARTIFACTS", "true")
    monkeypatch.setenv("TEXFOLIO_EVENTS_FILE", str(tmp_path / "events.jsonl"))

    config = RenderConfig.from_env()

    assert config.latex_compiler == "/opt/texlive/bin/pdflatex"
    assert config.work_dir == tmp_path / "work"
    assert config.compile_timeout_s == 15.0
    assert config.num_passes == 2
    assert config.keep_artifacts is True
    assert config.events_file == tmp_path / "events.jsonl"


@pytest.mark.unit
def test_from_env_unset_variables_use_defaults(monkeypatch):
    for name in (
        "TEXFOLIO_LATEX_COMPILER",
        "TEXFOLIO_WORK_DIR",
        "TEXFOLIO_COMPILE_TIMEOUT_S",
        "TEXFOLIO_NUM_PASSES",
        "TEXFOLIO_KEEP_LATEX_ARTIFACTS",
        "TEXFOLIO_EVENTS_FILE",
    ):
        monkeypatch.delenv(name, raising=False)

    config = RenderConfig.from_env()
    assert config.latex_compiler == "pdflatex"
    assert config.work_dir == Path("outs/render")
    assert config.events_file is None


@pytest.mark.unit
def test_from_yaml_layers_over_base(tmp_path):
    path = tmp_path / "render.yaml"
    path.write_text("latex_compiler: xelatex\nwork_dir: /var/tmp/texfolio\ncompile_timeout_s: 30\n")
    base = RenderConfig(num_passes=2)

    config = RenderConfig.from_yaml(path, base=base)

    assert config.latex_compiler == "xelatex"
    assert config.work_dir == Path("/var/tmp/texfolio")
    assert config.compile_timeout_s == 30
    assert config.num_passes == 2


@pytest.mark.unit
def test_from_yaml_rejects_unknown_keys(tmp_path):
    path = tmp_path / "render.yaml"
    path.write_text("latex_compilr: xelatex\n")

    with pytest.raises(ValueError, match="latex_compilr"):
        RenderConfig.from_yaml(path, base=RenderConfig())
