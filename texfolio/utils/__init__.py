"""
Shared utilities for TexFolio.

Common functionality used across contexts:
- Logging setup and pipeline events
- LLM provider access
- Timestamps
"""

from texfolio.utils.timestamp import now, now_exact, now_ms

__all__ = ["now", "now_exact", "now_ms"]
