"""
genie_heartbeat.main
--------------------

CLI entrypoint for operators and scripts.

Key contract:
- `genie-heartbeat --help` shows a Commands section.
- credential / app name / base URL fall back to OPSGENIE_* env vars
- exit codes: 0 ok, 1 API call failed, 2 missing credential
"""

from __future__ import annotations

import platform
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from genie_heartbeat.alert import AlertReporter
from genie_heartbeat.config import (
    API_KEY_ENV,
    API_URL_ENV,
    APP_NAME_ENV,
    DEFAULT_API_URL,
    GenieConfig,
)
from genie_heartbeat.errors import MissingCredentialError
from genie_heartbeat.heartbeat import DEFAULT_TEAM_NAME, Heartbeat
from genie_heartbeat.logging import AGENT_VERSION
from genie_heartbeat.model import build_registration
from genie_heartbeat.transport import CallOutcome, GenieClient

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="genie-heartbeat: OpsGenie heartbeat and alert reporting tool",
)

EXIT_CALL_FAILED = 1
EXIT_MISSING_CREDENTIAL = 2


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    """

    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


# -----------------------------
# SHARED OPTIONS
# -----------------------------
def _api_key_option():
    return typer.Option("", "--api-key", envvar=API_KEY_ENV, help="OpsGenie API key.")


def _app_name_option():
    return typer.Option("", "--app-name", envvar=APP_NAME_ENV, help="Heartbeat name / alert entity.")


def _api_url_option():
    return typer.Option(DEFAULT_API_URL, "--api-url", envvar=API_URL_ENV, help="OpsGenie API base URL.")


def _require_credential(config: GenieConfig) -> None:
    if not config.has_credential:
        typer.echo(str(MissingCredentialError()), err=True)
        raise typer.Exit(code=EXIT_MISSING_CREDENTIAL)


def _exit_on_failure(outcome: CallOutcome) -> None:
    if not outcome.ok:
        raise typer.Exit(code=EXIT_CALL_FAILED)


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Root command behavior: print a hint when no subcommand is given.
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: genie-heartbeat --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"genie-heartbeat v{AGENT_VERSION}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("run")
def run(
    api_key: str = _api_key_option(),
    app_name: str = _app_name_option(),
    api_url: str = _api_url_option(),
    team: str = typer.Option("", help=f"Owner team name (default: {DEFAULT_TEAM_NAME})."),
    interval: float = typer.Option(0, help="Ping interval in seconds (<= 1 means 60)."),
    duration: float = typer.Option(
        0,
        help="Stop after this many seconds (0 runs until Ctrl+C).",
        min=0,
    ),
) -> None:
    """
    Register the heartbeat and ping until interrupted.
    """
    config = GenieConfig(api_key=api_key, app_name=app_name, base_url=api_url)
    heartbeat = Heartbeat(config, team_name=team, interval_s=interval)

    try:
        heartbeat.start()
    except MissingCredentialError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=EXIT_MISSING_CREDENTIAL)

    deadline = time.monotonic() + duration if duration > 0 else None
    try:
        while deadline is None or time.monotonic() < deadline:
            remaining = 1.0 if deadline is None else deadline - time.monotonic()
            time.sleep(max(0.0, min(1.0, remaining)))
    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        pass
    finally:
        heartbeat.stop()


@app.command("ping")
def ping(
    api_key: str = _api_key_option(),
    app_name: str = _app_name_option(),
    api_url: str = _api_url_option(),
) -> None:
    """
    Send a single heartbeat ping.
    """
    config = GenieConfig(api_key=api_key, app_name=app_name, base_url=api_url)
    _require_credential(config)

    client = GenieClient(config)
    try:
        outcome = client.ping(config.app_name)
    finally:
        client.close()
    _exit_on_failure(outcome)


@app.command("register")
def register(
    api_key: str = _api_key_option(),
    app_name: str = _app_name_option(),
    api_url: str = _api_url_option(),
    team: str = typer.Option("", help=f"Owner team name (default: {DEFAULT_TEAM_NAME})."),
    registration_interval: int = typer.Option(5, help="Expected ping cadence registered remotely.", min=1),
    unit: str = typer.Option("minutes", help="Unit of --registration-interval (minutes|hours|days)."),
) -> None:
    """
    Create the heartbeat resource once.
    """
    config = GenieConfig(api_key=api_key, app_name=app_name, base_url=api_url)
    _require_credential(config)

    try:
        request = build_registration(
            config.app_name,
            team or DEFAULT_TEAM_NAME,
            interval=registration_interval,
            interval_unit=unit,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))

    client = GenieClient(config)
    try:
        outcome = client.register(request)
    finally:
        client.close()
    _exit_on_failure(outcome)


@app.command("alert")
def alert(
    message: str = typer.Argument(..., help="Alert message."),
    api_key: str = _api_key_option(),
    app_name: str = _app_name_option(),
    api_url: str = _api_url_option(),
    stack_file: Optional[Path] = typer.Option(
        None,
        "--stack-file",
        exists=True,
        dir_okay=False,
        help="File whose contents become the alert description.",
    ),
) -> None:
    """
    Send a P1 alert.
    """
    config = GenieConfig(api_key=api_key, app_name=app_name, base_url=api_url)
    _require_credential(config)

    stack = stack_file.read_bytes() if stack_file is not None else b""
    outcome = AlertReporter(config).report(RuntimeError(message), stack)
    _exit_on_failure(outcome)


# run command if invoked directly
if __name__ == "__main__":
    app()
