"""
Templating Context

Responsibilities:
- Sanitizes user-entered text for LaTeX text mode
- Maps resume documents onto template placeholders
- Resolves template identifiers to LaTeX template files and merges placeholders

Owns: Escaping rules, placeholder map, template files
Never: Writes job files or invokes the compiler
"""

from texfolio.contexts.templating.exceptions import TemplateNotFoundError, TemplateRenderError
from texfolio.contexts.templating.sanitizer import sanitize, sanitize_color, sanitize_url
from texfolio.contexts.templating.template_store import TemplateSource, TemplateStore
from texfolio.contexts.templating.transformer import transform

__all__ = [
    # Text sanitization
    "sanitize",
    "sanitize_url",
    "sanitize_color",
    # Placeholder mapping
    "transform",
    # Template store
    "TemplateStore",
    "TemplateSource",
    # Errors
    "TemplateNotFoundError",
    "TemplateRenderError",
]
