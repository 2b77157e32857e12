"""
genie_heartbeat.heartbeat

Heartbeat lifecycle: validate, register once, ping on an interval until stopped.

Example:
    hb = Heartbeat(GenieConfig(api_key="...", app_name="svc-a"), interval_s=30)
    hb.start()
    try:
        serve()
    finally:
        hb.stop()

Lifecycle:
- start: validate -> register (blocking) -> background thread
- thread: one immediate ping, then one ping per interval tick
- stop: set the cancel event; no ping is issued after stop returns
- restartable; each start gets a fresh cancel event
"""

from __future__ import annotations

import threading
from typing import Optional

import httpx

from genie_heartbeat.config import GenieConfig
from genie_heartbeat.errors import InvalidStateError, MissingCredentialError
from genie_heartbeat.logging import emit_event
from genie_heartbeat.model import (
    DEFAULT_REGISTRATION_INTERVAL,
    DEFAULT_REGISTRATION_INTERVAL_UNIT,
    build_registration,
    validate_registration_cadence,
)
from genie_heartbeat.transport import CallOutcome, ErrorCallback, GenieClient

DEFAULT_TEAM_NAME = "ops_team"
DEFAULT_INTERVAL_S = 60.0
# Intervals at or below this fall back to DEFAULT_INTERVAL_S
MIN_INTERVAL_S = 1.0


class Heartbeat:
    """
    Heartbeat descriptor + controller.

    team_name and interval_s are filled with defaults during start() and
    are read-only for the lifetime of the loop.

    interval_s is the local ping cadence; registration_interval /
    registration_interval_unit is the cadence registered remotely. They are
    independent: pass matching values if OpsGenie should expect pings at the
    same rate they are sent.
    """

    def __init__(
        self,
        config: GenieConfig,
        team_name: str = "",
        interval_s: Optional[float] = None,
        *,
        registration_interval: int = DEFAULT_REGISTRATION_INTERVAL,
        registration_interval_unit: str = DEFAULT_REGISTRATION_INTERVAL_UNIT,
        http_client: Optional[httpx.Client] = None,
        on_error: Optional[ErrorCallback] = None,
        join_timeout_s: float = 5.0,
    ) -> None:
        # Rejected here so start() only ever raises lifecycle errors
        validate_registration_cadence(registration_interval, registration_interval_unit)

        self.config = config
        self.team_name = team_name
        self.interval_s = interval_s
        self.registration_interval = registration_interval
        self.registration_interval_unit = registration_interval_unit
        self.join_timeout_s = join_timeout_s

        self._client = GenieClient(config, http_client=http_client, on_error=on_error)
        self._lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def api_key(self) -> str:
        return self.config.api_key

    @property
    def ping_name(self) -> str:
        return self.config.app_name

    @property
    def running(self) -> bool:
        return self._thread is not None

    def _apply_defaults(self) -> None:
        if not self.team_name:
            self.team_name = DEFAULT_TEAM_NAME
        if self.interval_s is None or self.interval_s <= MIN_INTERVAL_S:
            self.interval_s = DEFAULT_INTERVAL_S

    def register(self) -> CallOutcome:
        request = build_registration(
            self.ping_name,
            self.team_name,
            interval=self.registration_interval,
            interval_unit=self.registration_interval_unit,
        )
        return self._client.register(request)

    def ping(self) -> CallOutcome:
        return self._client.ping(self.ping_name)

    def _run(self, stop_event: threading.Event, interval_s: float) -> None:
        """
        Worker loop: immediate ping, then one per tick until cancelled
        """
        self._safe_ping()
        # wait() returns True once cancelled; remaining ticks are not drained
        while not stop_event.wait(interval_s):
            self._safe_ping()

    def _safe_ping(self) -> None:
        try:
            self.ping()
        except Exception as e:
            emit_event(
                "heartbeat_loop_error",
                ping_name=self.ping_name,
                error_type=type(e).__name__,
                message=str(e),
            )

    def start(self) -> None:
        """
        Start sending heartbeat requests.

        Raises MissingCredentialError before any HTTP call if no API key is
        configured, and InvalidStateError if already running. Registration
        and ping failures are logged and never raised.
        """
        with self._lock:
            if not self.config.has_credential:
                raise MissingCredentialError()
            if self._thread is not None:
                raise InvalidStateError("heartbeat already running")

            self._apply_defaults()

            emit_event(
                "heartbeat_start",
                ping_name=self.ping_name,
                team_name=self.team_name,
                interval_s=self.interval_s,
            )

            self.register()

            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(stop_event, self.interval_s),
                daemon=True,
                name=f"heartbeat-{self.ping_name}",
            )
            self._stop_event = stop_event
            self._thread = thread
            thread.start()

    def stop(self) -> None:
        """
        Stop the loop. Raises InvalidStateError if it is not running.

        Waits up to join_timeout_s for an in-flight ping to finish.
        """
        with self._lock:
            if self._thread is None or self._stop_event is None:
                raise InvalidStateError("heartbeat not running")

            thread = self._thread
            self._stop_event.set()
            self._thread = None
            self._stop_event = None

        if thread is not threading.current_thread():
            thread.join(timeout=self.join_timeout_s)
        self._client.close()

        emit_event("heartbeat_stop", ping_name=self.ping_name)

    def __enter__(self) -> "Heartbeat":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        if self.running:
            self.stop()
