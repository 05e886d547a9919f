"""Field helpers for JSON replies from the model."""

from typing import Any, Dict, List

from texfolio.contexts.coaching.exceptions import CoachResponseError


def parse_score(result: Dict[str, Any], key: str, task: str, text: str) -> int:
    """
    Read a 0-100 score from a parsed reply, clamping out-of-range values.

    Raises:
        CoachResponseError: If the key is missing, boolean or not numeric
    """
    value = result.get(key)
    if isinstance(value, bool):
        raise CoachResponseError(task, text, f"non-numeric {key}")
    try:
        score = float(value)
    except (TypeError, ValueError):
        raise CoachResponseError(task, text, f"missing or non-numeric {key}") from None
    return max(0, min(100, round(score)))


def string_list(value: Any) -> List[str]:
    """Non-empty strings from a reply list; anything that is not a list gives []."""
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]
