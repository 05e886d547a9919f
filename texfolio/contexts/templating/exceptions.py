"""Custom exceptions for the templating context with template references."""

from pathlib import Path
from typing import Optional


class TemplateNotFoundError(LookupError):
    """
    Raised when a template identifier has no backing template file.

    Attributes:
        template_id: The identifier that was requested
        template_path: Where the template was looked for (None if the id was rejected outright)
    """

    def __init__(self, template_id: str, template_path: Optional[Path] = None, available=None):
        self.template_id = template_id
        self.template_path = template_path
        self.available = sorted(available or [])

        parts = [f"Template not found: {template_id!r}"]
        if template_path is not None:
            parts.append(f"Looked for: {template_path}")
        if self.available:
            parts.append(f"Available templates: {', '.join(self.available)}")

        super().__init__("\n".join(parts))


class TemplateRenderError(Exception):
    """
    Raised when merging placeholders into a template fails.

    Attributes:
        message: Error description
        template_id: Template being rendered
        template_path: Path to the template file
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        template_id: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_id = template_id
        self.template_path = template_path
        self.original_error = original_error

        parts = [message]

        if template_id and template_path:
            parts.append(f"\nTemplate: {template_path}")
            parts.append(f"Template id: {template_id}")

        if original_error:
            parts.append(f"\nOriginal error: {original_error}")

        super().__init__("\n".join(parts))
