"""genie_heartbeat package exports."""

from genie_heartbeat.alert import AlertReporter, report_alert
from genie_heartbeat.config import GenieConfig
from genie_heartbeat.errors import GenieHeartbeatError, InvalidStateError, MissingCredentialError
from genie_heartbeat.heartbeat import Heartbeat
from genie_heartbeat.logging import AGENT_VERSION
from genie_heartbeat.transport import CallOutcome

__version__ = AGENT_VERSION

__all__ = [
    "AlertReporter",
    "CallOutcome",
    "GenieConfig",
    "GenieHeartbeatError",
    "Heartbeat",
    "InvalidStateError",
    "MissingCredentialError",
    "report_alert",
]
