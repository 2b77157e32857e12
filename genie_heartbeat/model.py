"""
genie_heartbeat.model

Request payloads + deterministic serialization primitives.

Design goals:
- Explicit key mapping to OpsGenie field names (no serialization via __dict__)
- Write-once payloads, built per call and discarded afterwards
- Deterministic ordering so request bodies are stable in tests and logs
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

# Registration defaults: remote cadence, separate from the local ping interval
DEFAULT_REGISTRATION_INTERVAL = 5
DEFAULT_REGISTRATION_INTERVAL_UNIT = "minutes"

ALERT_PRIORITY = "P1"

# Set valid value checks
VALID_INTERVAL_UNITS = {"minutes", "hours", "days"}
VALID_PRIORITIES = {"P1", "P2", "P3", "P4", "P5"}


@dataclass(frozen=True)
class RegistrationRequest:
    """
    Body of POST /heartbeats
    - name: heartbeat key, also used in the ping URL
    - owner_team: team that owns the heartbeat (must exist remotely)
    """

    name: str
    owner_team: str
    description: str = ""
    interval_unit: str = DEFAULT_REGISTRATION_INTERVAL_UNIT
    interval: int = DEFAULT_REGISTRATION_INTERVAL
    enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "intervalUnit": self.interval_unit,
            "interval": self.interval,
            "enabled": self.enabled,
            "ownerTeam": {"name": self.owner_team},
        }


@dataclass(frozen=True)
class AlertPayload:
    """
    Body of POST /alerts
    - message: rendered error
    - description: stack trace text
    - entity: application name
    """

    message: str
    description: str
    entity: str
    priority: str = ALERT_PRIORITY

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "description": self.description,
            "entity": self.entity,
            "priority": self.priority,
        }


Payload = Union[RegistrationRequest, AlertPayload]


def payload_to_json(payload: Payload) -> str:
    """
    Serialize a request payload

    Rules:
    - sort_keys=True ensures stable key order
    - separators remove whitespace to avoid formatting drift
    - ensure_ascii=False keeps UTF-8 stack traces readable
    """
    return json.dumps(
        payload.to_dict(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def validate_registration_cadence(interval: int, interval_unit: str) -> None:
    """
    Raises ValueError on an interval OpsGenie would not accept
    """
    if interval_unit not in VALID_INTERVAL_UNITS:
        raise ValueError(f"registration.interval_unit must be: {sorted(VALID_INTERVAL_UNITS)}")
    if interval < 1:
        raise ValueError("registration.interval must be >= 1")


def validate_registration(request: RegistrationRequest) -> None:
    """
    Raises ValueError on invalid registration

    An empty name is not rejected here; the remote call fails and is logged.
    """
    validate_registration_cadence(request.interval, request.interval_unit)


def validate_alert(payload: AlertPayload) -> None:
    """
    Raises ValueError on invalid alert
    """
    if not payload.message:
        raise ValueError("alert.message is empty")
    if payload.priority not in VALID_PRIORITIES:
        raise ValueError(f"alert.priority must be: {sorted(VALID_PRIORITIES)}")


def stack_to_text(stack: Union[bytes, str, None]) -> str:
    if stack is None:
        return ""
    if isinstance(stack, bytes):
        return stack.decode("utf-8", errors="replace")
    return stack


def build_registration(
    name: str,
    owner_team: str,
    *,
    interval: int = DEFAULT_REGISTRATION_INTERVAL,
    interval_unit: str = DEFAULT_REGISTRATION_INTERVAL_UNIT,
) -> RegistrationRequest:
    """
    Assemble a RegistrationRequest (description empty, always enabled)
    """
    request = RegistrationRequest(
        name=name,
        owner_team=owner_team,
        interval=interval,
        interval_unit=interval_unit,
    )

    # validate before returning
    validate_registration(request)
    return request


def build_alert(error: BaseException, stack: Union[bytes, str, None], *, entity: str) -> AlertPayload:
    """
    Assemble a P1 AlertPayload from an error + raw stack trace
    """
    if error is None:
        raise ValueError("error must not be None")

    # Exceptions raised without args render as ""; keep the message non-empty
    message = str(error) or type(error).__name__

    payload = AlertPayload(
        message=message,
        description=stack_to_text(stack),
        entity=entity,
    )

    validate_alert(payload)
    return payload
