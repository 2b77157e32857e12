"""
Contract tests for request payload shape.

Field names mirror the OpsGenie v2 API; if these fail, the remote side
will reject or misread our requests.
"""

import json

import pytest

from genie_heartbeat.model import (
    build_alert,
    build_registration,
    payload_to_json,
    stack_to_text,
)


def test_registration_body_round_trips_name_and_team() -> None:
    """
    name / ownerTeam.name come from the descriptor; the rest is fixed.
    """
    body = json.loads(payload_to_json(build_registration("svc-a", "platform")))

    assert body == {
        "name": "svc-a",
        "description": "",
        "intervalUnit": "minutes",
        "interval": 5,
        "enabled": True,
        "ownerTeam": {"name": "platform"},
    }


def test_registration_interval_is_explicit() -> None:
    body = build_registration("svc-a", "ops_team", interval=2, interval_unit="hours").to_dict()

    assert body["interval"] == 2
    assert body["intervalUnit"] == "hours"


def test_registration_rejects_unknown_unit() -> None:
    with pytest.raises(ValueError, match="interval_unit"):
        build_registration("svc-a", "ops_team", interval_unit="fortnights")


def test_registration_allows_empty_name() -> None:
    """
    An empty name is left for the remote side to reject.
    """
    assert build_registration("", "ops_team").to_dict()["name"] == ""


def test_alert_body_from_error_and_stack() -> None:
    payload = build_alert(RuntimeError("disk full"), b"trace...", entity="svc-a")

    assert payload.to_dict() == {
        "message": "disk full",
        "description": "trace...",
        "entity": "svc-a",
        "priority": "P1",
    }


def test_alert_message_falls_back_to_error_type() -> None:
    payload = build_alert(KeyError(), None, entity="svc-a")

    # KeyError() renders as "" so the class name is used
    assert payload.message == "KeyError"
    assert payload.description == ""


def test_alert_requires_error() -> None:
    with pytest.raises(ValueError, match="must not be None"):
        build_alert(None, b"", entity="svc-a")


def test_stack_to_text_replaces_invalid_utf8() -> None:
    assert stack_to_text(b"ok \xff") == "ok �"
    assert stack_to_text("already text") == "already text"
