"""
genie_heartbeat.config

Explicit API configuration, injected into heartbeats and alert reporters.

- api_key: OpsGenie integration key (validated at Heartbeat.start, not here)
- app_name: heartbeat name and alert entity
- base_url: API root; one scheme for every call
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_API_URL = "https://api.opsgenie.com/v2"

# Env var names, also used as CLI fallbacks
API_KEY_ENV = "OPSGENIE_API_KEY"
APP_NAME_ENV = "OPSGENIE_APP_NAME"
API_URL_ENV = "OPSGENIE_API_URL"


@dataclass(frozen=True)
class GenieConfig:
    api_key: str
    app_name: str
    base_url: str = DEFAULT_API_URL
    # None keeps the transport defaults
    timeout_s: Optional[float] = None

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def authorization_header(self) -> str:
        return f"GenieKey {self.api_key}"

    def url(self, path: str) -> str:
        """
        Join base_url and an API path ("/heartbeats", "/alerts", ...)
        """
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "GenieConfig":
        """
        Build config from OPSGENIE_* env vars

        Missing values become empty strings so validation stays in one place.
        """
        env = os.environ if environ is None else environ
        return GenieConfig(
            api_key=env.get(API_KEY_ENV, "").strip(),
            app_name=env.get(APP_NAME_ENV, "").strip(),
            base_url=env.get(API_URL_ENV, "").strip() or DEFAULT_API_URL,
        )
