"""
Contract tests for the alert reporter.

Alerts are independent of any heartbeat: one POST per report, P1, entity
taken from the config.
"""

import json

import httpx

from genie_heartbeat.alert import AlertReporter, report_alert
from genie_heartbeat.heartbeat import Heartbeat


def test_report_posts_single_p1_alert(config, router) -> None:
    alerts = router.post("/alerts").mock(return_value=httpx.Response(202))

    outcome = AlertReporter(config).report(RuntimeError("disk full"), b"trace...")

    assert outcome.ok
    assert outcome.status_code == 202
    assert alerts.call_count == 1

    request = alerts.calls.last.request
    assert request.headers["Authorization"] == "GenieKey k1"
    assert json.loads(request.content) == {
        "message": "disk full",
        "description": "trace...",
        "entity": "svc-a",
        "priority": "P1",
    }


def test_report_works_regardless_of_heartbeat_state(config, router) -> None:
    """
    Before start, while running, and after stop: one POST each.
    """
    alerts = router.post("/alerts").mock(return_value=httpx.Response(202))
    router.post("/heartbeats").mock(return_value=httpx.Response(201))
    router.get("/heartbeats/svc-a/ping").mock(return_value=httpx.Response(202))

    reporter = AlertReporter(config)
    hb = Heartbeat(config)

    reporter.report(RuntimeError("before"))
    hb.start()
    reporter.report(RuntimeError("during"))
    hb.stop()
    reporter.report(RuntimeError("after"))

    messages = [json.loads(call.request.content)["message"] for call in alerts.calls]
    assert messages == ["before", "during", "after"]


def test_report_exception_uses_traceback(config, router) -> None:
    alerts = router.post("/alerts").mock(return_value=httpx.Response(202))

    try:
        raise OSError("disk full")
    except OSError as e:
        AlertReporter(config).report_exception(e)

    body = json.loads(alerts.calls.last.request.content)
    assert body["message"] == "disk full"
    assert body["description"].startswith("Traceback (most recent call last):")
    assert "OSError: disk full" in body["description"]


def test_failed_alert_is_reported_not_raised(config, router) -> None:
    router.post("/alerts").mock(return_value=httpx.Response(500))
    failures = []

    outcome = report_alert(
        config,
        RuntimeError("disk full"),
        b"",
        on_error=lambda call, exc: failures.append(call),
    )

    assert not outcome.ok
    assert outcome.status_code == 500
    assert outcome.error_type == "HTTPStatusError"
    assert failures == ["alert"]
