"""
genie_heartbeat.transport

Best-effort HTTP calls against the OpsGenie v2 API.

Calls:
- register:   POST {base}/heartbeats
- ping:       GET  {base}/heartbeats/{name}/ping
- send_alert: POST {base}/alerts

Failure semantics:
- connection errors and non-2xx responses are both failures
- failures go to the on_error callback and come back as data (CallOutcome)
- nothing is raised, nothing is retried
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import quote

import httpx

from genie_heartbeat.config import GenieConfig
from genie_heartbeat.logging import emit_event, log_call_failure
from genie_heartbeat.model import AlertPayload, RegistrationRequest, payload_to_json

# on_error(call_name, exc); call_name is "register" | "ping" | "alert"
ErrorCallback = Callable[[str, Exception], None]

# Transport errors + non-2xx (HTTPError), plus local request-build failures:
# bad URL, non-ASCII header values, use of a closed client
REQUEST_FAILURES = (httpx.HTTPError, httpx.InvalidURL, UnicodeError, RuntimeError)


@dataclass(frozen=True)
class CallOutcome:
    """
    Normalized call result
    - ok: false=failure, error details in error fields
    - status_code: set whenever a response arrived (including non-2xx)
    """

    name: str
    ok: bool
    status_code: Optional[int] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class GenieClient:
    """
    Thin wrapper over httpx.Client carrying the GenieKey auth header.

    An injected http_client is used as-is and never closed here; otherwise
    one is created on first use and dropped by close().
    """

    def __init__(
        self,
        config: GenieConfig,
        *,
        http_client: Optional[httpx.Client] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self.config = config
        self.on_error = on_error or log_call_failure
        self._http = http_client
        self._owns_http = http_client is None
        self._lock = threading.Lock()

    def _client(self) -> httpx.Client:
        with self._lock:
            if self._http is None:
                kwargs = {}
                if self.config.timeout_s is not None:
                    kwargs["timeout"] = self.config.timeout_s
                self._http = httpx.Client(**kwargs)
            return self._http

    def close(self) -> None:
        with self._lock:
            if self._http is not None and self._owns_http:
                self._http.close()
                self._http = None

    def _headers(self, *, json_body: bool) -> dict[str, str]:
        headers = {"Authorization": self.config.authorization_header}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _report_failure(self, name: str, exc: Exception) -> None:
        try:
            self.on_error(name, exc)
        except Exception as cb_exc:
            emit_event(
                "callback_failed",
                call=name,
                error_type=type(cb_exc).__name__,
                message=str(cb_exc),
            )

    def _call(self, name: str, method: str, path: str, body: Optional[str] = None) -> CallOutcome:
        """
        Run one request & collect failure as data
        """
        status_code = None
        try:
            response = self._client().request(
                method,
                self.config.url(path),
                headers=self._headers(json_body=body is not None),
                content=body,
            )
            status_code = response.status_code
            response.raise_for_status()
        except REQUEST_FAILURES as e:
            self._report_failure(name, e)
            return CallOutcome(
                name=name,
                ok=False,
                status_code=status_code,
                error_type=type(e).__name__,
                error_message=str(e),
            )
        return CallOutcome(name=name, ok=True, status_code=status_code)

    def register(self, request: RegistrationRequest) -> CallOutcome:
        outcome = self._call("register", "POST", "/heartbeats", payload_to_json(request))
        if outcome.ok:
            emit_event(
                "heartbeat_registered",
                ping_name=request.name,
                team_name=request.owner_team,
                status_code=outcome.status_code,
            )
        return outcome

    def ping(self, ping_name: str) -> CallOutcome:
        outcome = self._call("ping", "GET", f"/heartbeats/{quote(ping_name, safe='')}/ping")
        if outcome.ok:
            emit_event("ping_sent", ping_name=ping_name, status_code=outcome.status_code)
        return outcome

    def send_alert(self, payload: AlertPayload) -> CallOutcome:
        outcome = self._call("alert", "POST", "/alerts", payload_to_json(payload))
        if outcome.ok:
            emit_event(
                "alert_sent",
                entity=payload.entity,
                priority=payload.priority,
                status_code=outcome.status_code,
            )
        return outcome
