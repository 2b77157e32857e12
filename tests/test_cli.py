"""
Contract tests for the CLI surface and exit codes.
"""

import json

import httpx
from typer.testing import CliRunner

from genie_heartbeat.main import app

ENV = {
    "OPSGENIE_API_KEY": "k1",
    "OPSGENIE_APP_NAME": "svc-a",
    "OPSGENIE_API_URL": "https://genie.test/v2",
}


def test_help_lists_commands() -> None:
    result = CliRunner().invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("version", "run", "ping", "register", "alert"):
        assert command in result.output


def test_version_prints_agent_version() -> None:
    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.output.startswith("genie-heartbeat v")


def test_run_without_credential_exits_two(router) -> None:
    result = CliRunner().invoke(app, ["run", "--duration", "0.1"], env={"OPSGENIE_API_KEY": ""})

    assert result.exit_code == 2
    assert len(router.calls) == 0


def test_run_registers_and_pings(router) -> None:
    register = router.post("/heartbeats").mock(return_value=httpx.Response(201))
    ping = router.get("/heartbeats/svc-a/ping").mock(return_value=httpx.Response(202))

    result = CliRunner().invoke(app, ["run", "--team", "platform", "--duration", "0.2"], env=ENV)

    assert result.exit_code == 0
    assert register.call_count == 1
    assert ping.call_count == 1
    assert json.loads(register.calls.last.request.content)["ownerTeam"] == {"name": "platform"}


def test_ping_failure_exits_one(router) -> None:
    router.get("/heartbeats/svc-a/ping").mock(return_value=httpx.Response(503))

    result = CliRunner().invoke(app, ["ping"], env=ENV)

    assert result.exit_code == 1


def test_register_uses_default_team(router) -> None:
    register = router.post("/heartbeats").mock(return_value=httpx.Response(201))

    result = CliRunner().invoke(app, ["register"], env=ENV)

    assert result.exit_code == 0
    body = json.loads(register.calls.last.request.content)
    assert body["ownerTeam"] == {"name": "ops_team"}
    assert body["interval"] == 5


def test_alert_reads_stack_file(router, tmp_path) -> None:
    alerts = router.post("/alerts").mock(return_value=httpx.Response(202))
    stack_file = tmp_path / "stack.txt"
    stack_file.write_text("trace...", encoding="utf-8")

    result = CliRunner().invoke(app, ["alert", "disk full", "--stack-file", str(stack_file)], env=ENV)

    assert result.exit_code == 0
    assert json.loads(alerts.calls.last.request.content) == {
        "message": "disk full",
        "description": "trace...",
        "entity": "svc-a",
        "priority": "P1",
    }
