"""
Text sanitization for LaTeX text mode.

User-entered strings pass through sanitize() before they reach a template. The
pipeline is normalize -> decode -> escape, in that order:

1. Alternate encodings of "/" (URL-encoded, numeric character references, literal
   unicode escapes, and their mangled leftovers) become a literal "/".
2. A fixed set of HTML entities is decoded.
3. LaTeX reserved characters are escaped in a single pass, so replacement text
   such as \\textbackslash{} is never escaped again.
"""

import re
from typing import Optional

# Longest forms first: "&#x2F;" must not be half-eaten by the bare "x2F;" rule
SLASH_VARIANTS = re.compile(
    r"&#x0*2F;?|&#0*47;?|\\u002F|%2F|0x2F;|x2F;",
    re.IGNORECASE,
)

HTML_ENTITIES = [
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
]

LATEX_ESCAPES = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
LATEX_SPECIAL_CHARS = re.compile(r"[\\&%$#_{}~^]")

# Inside \href{} hyperref copes with most characters; these are the ones that are not
URL_DROPPED_CHARS = re.compile(r"[\\{}\s]")
URL_ESCAPED_CHARS = re.compile(r"[%#]")

HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def normalize_slashes(text: str) -> str:
    """Replace known alternate encodings of the forward slash with "/"."""
    return SLASH_VARIANTS.sub("/", text)


def decode_html_entities(text: str) -> str:
    """Decode the small set of HTML entities browsers and editors leak into form data."""
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def escape_latex(text: str) -> str:
    """Escape LaTeX reserved characters in one pass."""
    return LATEX_SPECIAL_CHARS.sub(lambda m: LATEX_ESCAPES[m.group(0)], text)


def sanitize(raw: Optional[str]) -> str:
    """
    Make an arbitrary string safe to place in LaTeX text mode.

    Args:
        raw: Any user-entered string (None is treated as empty)

    Returns:
        Sanitized string, never None

    Examples:
        >>> sanitize("R&D: 50% of $budget")
        'R\\\\&D: 50\\\\% of \\\\$budget'
        >>> sanitize("path%2Fto%2Ffile")
        'path/to/file'
        >>> sanitize(None)
        ''
    """
    if not raw:
        return ""
    text = normalize_slashes(str(raw))
    text = decode_html_entities(text)
    return escape_latex(text)


def sanitize_url(raw: Optional[str]) -> Optional[str]:
    """
    Prepare a URL (or email address) for use as an \\href{} / mailto: target.

    Returns:
        The cleaned URL, or None when raw is absent or blank
    """
    if raw is None or not str(raw).strip():
        return None
    text = decode_html_entities(normalize_slashes(str(raw).strip()))
    text = URL_DROPPED_CHARS.sub("", text)
    text = URL_ESCAPED_CHARS.sub(lambda m: "\\" + m.group(0), text)
    return text or None


def sanitize_color(raw: Optional[str], default: str = "2563EB") -> str:
    """
    Normalize a CSS-style hex color to the RRGGBB form the xcolor HTML model expects.

    Anything that is not a 3- or 6-digit hex color falls back to default.

    Examples:
        >>> sanitize_color("#2563eb")
        '2563EB'
        >>> sanitize_color("#abc")
        'AABBCC'
        >>> sanitize_color("red}\\\\input{/etc/passwd}")
        '2563EB'
    """
    match = HEX_COLOR.match((raw or "").strip())
    if not match:
        return default.lstrip("#").upper()
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return digits.upper()
