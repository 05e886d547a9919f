"""
Resume template store.

Templates are LaTeX documents with Jinja2 placeholders, one file per visual style:
{templates_path}/{template_id}.tex.jinja. They use custom delimiters so LaTeX braces
and percent signs are never read as template syntax:
- Variable: <<< var >>>
- Block: <%% block %%>
- Comment: <# comment #>

Templates are read from disk on every resolve(); there is no cache.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from jinja2 import Environment, StrictUndefined, TemplateError

from texfolio.contexts.resumes.models import DEFAULT_TEMPLATE_ID
from texfolio.contexts.templating.exceptions import TemplateNotFoundError, TemplateRenderError

load_dotenv()

BUNDLED_TEMPLATES_PATH = Path(__file__).parent / "templates"
TEMPLATES_PATH = Path(os.getenv("TEXFOLIO_TEMPLATES_PATH", str(BUNDLED_TEMPLATES_PATH)))

TEMPLATE_SUFFIX = ".tex.jinja"
TEMPLATE_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


@dataclass(frozen=True)
class TemplateSource:
    """A resolved template: its identifier, file and raw text."""

    template_id: str
    path: Path
    text: str


def create_latex_environment() -> Environment:
    """Jinja2 environment with delimiters that cannot collide with LaTeX syntax."""
    return Environment(
        # Catches silent failures (misspelled placeholders)
        undefined=StrictUndefined,
        variable_start_string="<<<",
        variable_end_string=">>>",
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        # Values are sanitized for LaTeX before they get here
        autoescape=False,
        # Preserve whitespace (important for LaTeX)
        trim_blocks=False,
        lstrip_blocks=False,
        keep_trailing_newline=True,
    )


class TemplateStore:
    """Maps template identifiers to template files and merges placeholders into them."""

    def __init__(self, templates_path: Optional[Path] = None, default_template_id: str = DEFAULT_TEMPLATE_ID):
        """
        Args:
            templates_path: Directory of *.tex.jinja files. Defaults to
                            TEXFOLIO_TEMPLATES_PATH, then the bundled templates
            default_template_id: Identifier used when a resume does not name one
        """
        self.templates_path = Path(templates_path) if templates_path is not None else TEMPLATES_PATH
        self.default_template_id = default_template_id
        self.env = create_latex_environment()

    def get_template_path(self, template_id: str) -> Path:
        return self.templates_path / f"{template_id}{TEMPLATE_SUFFIX}"

    def available(self) -> List[str]:
        """Sorted identifiers of every template file in the store."""
        if not self.templates_path.is_dir():
            return []
        return sorted(
            path.name[: -len(TEMPLATE_SUFFIX)]
            for path in self.templates_path.glob(f"*{TEMPLATE_SUFFIX}")
        )

    def resolve(self, template_id: Optional[str]) -> TemplateSource:
        """
        Resolve an identifier to its template file and read it.

        Args:
            template_id: Template identifier; None or "" means the default template

        Returns:
            TemplateSource with the template text

        Raises:
            TemplateNotFoundError: If the id is not a plain identifier or has no file
        """
        template_id = template_id or self.default_template_id

        if not TEMPLATE_ID_PATTERN.match(template_id):
            raise TemplateNotFoundError(template_id, available=self.available())

        path = self.get_template_path(template_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise TemplateNotFoundError(template_id, path, available=self.available()) from e

        return TemplateSource(template_id=template_id, path=path, text=text)

    def merge(self, source: TemplateSource, placeholders: Dict[str, Any]) -> str:
        """
        Render a template with a placeholder map.

        Raises:
            TemplateRenderError: On Jinja2 syntax errors or undefined placeholders
        """
        try:
            template = self.env.from_string(source.text)
            return template.render(**placeholders)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Failed to render template '{source.template_id}'",
                template_id=source.template_id,
                template_path=source.path,
                original_error=e,
            ) from e
