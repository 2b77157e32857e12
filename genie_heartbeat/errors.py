"""
genie_heartbeat.errors

Caller-visible errors. Transport failures are never raised; see transport.
"""


class GenieHeartbeatError(Exception):
    """Base for errors surfaced to callers."""


class MissingCredentialError(GenieHeartbeatError):
    """No OpsGenie API key configured."""

    def __init__(self, message: str = "Please provide OpsGenie apikey") -> None:
        super().__init__(message)


class InvalidStateError(GenieHeartbeatError):
    """Lifecycle call made in the wrong state (double start, stop while stopped)."""
