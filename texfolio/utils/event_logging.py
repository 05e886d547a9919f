"""
Render event logging (Tier 2 logging).

Appends one JSON object per line to an events file so render outcomes can be
streamed, filtered and counted without parsing the detailed Tier 1 logs.

Usage:
    from texfolio.utils.event_logging import log_render_event, get_recent_events

    log_render_event(
        events_file,
        event_type="render_completed",
        job_id="resume_1731580000000_1a2b3c4d",
        template_id="classic",
        elapsed_s=1.8,
    )
"""

import json
from pathlib import Path
from typing import Optional

from texfolio.utils.timestamp import now_exact

RENDER_EVENT_TYPES = {"render_started", "render_completed", "render_failed"}


def log_render_event(events_file: Optional[Path], event_type: str, job_id: str, **extra_fields) -> None:
    """
    Append a render event to the events file.

    Does nothing when events_file is None, so callers can pass their configured
    value through unconditionally.

    Args:
        events_file: JSON Lines file to append to (created with parents if missing)
        event_type: One of RENDER_EVENT_TYPES
        job_id: Render job identifier
        **extra_fields: Event-specific fields (must be JSON serializable)

    Raises:
        ValueError: If event_type is not a known render event
    """
    if events_file is None:
        return

    if event_type not in RENDER_EVENT_TYPES:
        raise ValueError(f"Unknown render event type: {event_type}")

    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "job_id": job_id,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event, default=str) + "\n")


def get_recent_events(
    events_file: Path, n: int = 10, event_type: Optional[str] = None
) -> list[dict]:
    """
    Get the last n events, optionally filtered by type.

    Malformed lines are skipped.

    Returns:
        List of event dicts (most recent last)
    """
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                continue

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
