"""Unit tests for TemplateStore."""

import pytest

from texfolio.contexts.templating.exceptions import TemplateNotFoundError, TemplateRenderError
from texfolio.contexts.templating.template_store import BUNDLED_TEMPLATES_PATH, TemplateStore
from texfolio.contexts.templating.transformer import transform


@pytest.mark.unit
def test_bundled_templates_are_available():
    store = TemplateStore(BUNDLED_TEMPLATES_PATH)
    assert store.available() == ["classic", "faangpath", "premium"]


@pytest.mark.unit
def test_resolve_reads_template_file():
    store = TemplateStore(BUNDLED_TEMPLATES_PATH)
    source = store.resolve("premium")

    assert source.template_id == "premium"
    assert source.path == BUNDLED_TEMPLATES_PATH / "premium.tex.jinja"
    assert r"\documentclass" in source.text


@pytest.mark.unit
@pytest.mark.parametrize("template_id", [None, ""])
def test_missing_id_falls_back_to_default(template_id):
    store = TemplateStore(BUNDLED_TEMPLATES_PATH)
    assert store.resolve(template_id).template_id == "classic"


@pytest.mark.unit
def test_unknown_template_raises():
    store = TemplateStore(BUNDLED_TEMPLATES_PATH)

    with pytest.raises(TemplateNotFoundError) as exc_info:
        store.resolve("does-not-exist")

    assert exc_info.value.template_id == "does-not-exist"
    assert "classic" in exc_info.value.available


@pytest.mark.unit
@pytest.mark.parametrize("template_id", ["../classic", "sub/classic", "..", "/etc/passwd"])
def test_ids_with_path_separators_are_rejected(template_id):
    store = TemplateStore(BUNDLED_TEMPLATES_PATH)

    with pytest.raises(TemplateNotFoundError) as exc_info:
        store.resolve(template_id)
    assert exc_info.value.template_path is None


@pytest.mark.unit
def test_templates_are_read_fresh(tmp_path):
    """Edits to a template file are picked up without restarting."""
    (tmp_path / "mine.tex.jinja").write_text("v1 <<< full_name >>>")
    store = TemplateStore(tmp_path)
    assert store.resolve("mine").text == "v1 <<< full_name >>>"

    (tmp_path / "mine.tex.jinja").write_text("v2 <<< full_name >>>")
    assert store.resolve("mine").text == "v2 <<< full_name >>>"


@pytest.mark.unit
def test_missing_templates_dir_has_no_templates(tmp_path):
    assert TemplateStore(tmp_path / "nope").available() == []


@pytest.mark.unit
def test_merge_uses_latex_safe_delimiters(tmp_path):
    (tmp_path / "t.tex.jinja").write_text(
        "\\textbf{<<< name >>>} {% not jinja %} <%% if flag %%>yes<%% endif %%><# note #>"
    )
    store = TemplateStore(tmp_path)

    merged = store.merge(store.resolve("t"), {"name": "Jane", "flag": True})
    assert merged == "\\textbf{Jane} {% not jinja %} yes"


@pytest.mark.unit
def test_merge_undefined_placeholder_raises(tmp_path):
    (tmp_path / "t.tex.jinja").write_text("<<< missing >>>")
    store = TemplateStore(tmp_path)

    with pytest.raises(TemplateRenderError) as exc_info:
        store.merge(store.resolve("t"), {})
    assert exc_info.value.template_id == "t"


@pytest.mark.unit
@pytest.mark.parametrize("template_id", ["classic", "premium", "faangpath"])
def test_bundled_templates_merge_full_resume(template_id, full_resume):
    store = TemplateStore(BUNDLED_TEMPLATES_PATH)
    latex = store.merge(store.resolve(template_id), transform(full_resume))

    assert "Ada Lovelace" in latex
    assert r"\definecolor{primary}{HTML}{1E40AF}" in latex
    assert r"Cut costs by 30\%" in latex
    assert "<<<" not in latex and "<%%" not in latex


@pytest.mark.unit
@pytest.mark.parametrize("template_id", ["classic", "premium", "faangpath"])
def test_bundled_templates_merge_minimal_resume(template_id, minimal_resume):
    store = TemplateStore(BUNDLED_TEMPLATES_PATH)
    latex = store.merge(store.resolve(template_id), transform(minimal_resume))

    assert "Jane Doe" in latex
    assert r"\end{document}" in latex
