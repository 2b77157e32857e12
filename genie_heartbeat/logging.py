"""
genie_heartbeat.logging

Structured JSON event logging for ops ingestion

Contract:
- One JSON object per line to stdout
- Stable event vocabulary (allowlist)
- UTC timestamps only
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

AGENT_VERSION = "0.1.0"

# Event types
VALID_EVENT_TYPES = {
    "heartbeat_start",
    "heartbeat_stop",
    "heartbeat_registered",
    "register_failed",
    "ping_sent",
    "ping_failed",
    "alert_sent",
    "alert_failed",
    "callback_failed",
    "heartbeat_loop_error",
}


def _truncate_message(value: str, *, limit: int = 200) -> str:
    """
    Cap message length to keep events compact
    """
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


# Time: current in UTC ISO 8601
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, *, agent_version: str = AGENT_VERSION, **fields: Any) -> None:
    """
    Emit structured event line to stdout

    Rules:
    - event_type in VALID_EVENT_TYPES
    - event_type, agent_version, timestamp always present
    - sort_keys + compact separators for format
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    if "message" in fields and isinstance(fields["message"], str):
        # Avoid emitting long strings in event fields
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "agent_version": agent_version,
        **fields,
    }

    print(
        json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        ),
        flush=True,
    )


def log_call_failure(call: str, exc: Exception) -> None:
    """
    Default diagnostic callback for failed API calls

    call: "register" | "ping" | "alert"
    """
    emit_event(
        f"{call}_failed",
        error_type=type(exc).__name__,
        message=str(exc),
    )
