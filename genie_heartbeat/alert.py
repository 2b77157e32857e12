"""
genie_heartbeat.alert

One-shot P1 alert for fatal errors. Independent of any heartbeat loop.
"""

from __future__ import annotations

import traceback
from typing import Optional, Union

import httpx

from genie_heartbeat.config import GenieConfig
from genie_heartbeat.model import build_alert
from genie_heartbeat.transport import CallOutcome, ErrorCallback, GenieClient


class AlertReporter:
    """
    Report errors to POST {base}/alerts with entity = config.app_name.

    Delivery is best-effort: failures reach on_error, never the caller.
    """

    def __init__(
        self,
        config: GenieConfig,
        *,
        http_client: Optional[httpx.Client] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self.config = config
        self._client = GenieClient(config, http_client=http_client, on_error=on_error)

    def report(self, error: BaseException, stack_trace: Union[bytes, str, None] = b"") -> CallOutcome:
        payload = build_alert(error, stack_trace, entity=self.config.app_name)
        try:
            return self._client.send_alert(payload)
        finally:
            self._client.close()

    def report_exception(self, exc: BaseException) -> CallOutcome:
        """
        Report exc with its own formatted traceback as the description
        """
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return self.report(exc, stack)


def report_alert(
    config: GenieConfig,
    error: BaseException,
    stack_trace: Union[bytes, str, None] = b"",
    *,
    on_error: Optional[ErrorCallback] = None,
) -> CallOutcome:
    return AlertReporter(config, on_error=on_error).report(error, stack_trace)
