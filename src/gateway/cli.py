"""Click CLI for serving the gateway and managing commands."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click
import uvicorn

from src.audit.logger import AuditLogger, validate_audit_chain
from src.gateway.app import create_app
from src.interactions.commands import command_definitions
from src.interactions.errors import ConfigurationError, RegistrationError
from src.interactions.registrar import CommandRegistrar
from src.models import GatewayConfig


@click.group()
@click.option(
    "--audit-log", default=None, envvar="AUDIT_LOG_PATH", help="Audit log file path.",
)
@click.pass_context
def cli(ctx: click.Context, audit_log: str | None) -> None:
    """Discord interactions gateway CLI."""
    ctx.ensure_object(dict)
    ctx.obj["audit_logger"] = AuditLogger.from_env(audit_log) if audit_log else None


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8787, show_default=True, type=int)
@click.option(
    "--log-level", default="INFO", envvar="LOG_LEVEL", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
)
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, log_level: str) -> None:
    """Serve the interactions endpoint."""
    logging.basicConfig(level=log_level.upper())
    try:
        config = GatewayConfig.from_env()
        app = create_app(config, ctx.obj["audit_logger"])
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())


@cli.command()
@click.option("--application-id", envvar="DISCORD_APPLICATION_ID", required=True)
@click.option("--token", envvar="DISCORD_TOKEN", required=True, help="Bot token.")
@click.pass_context
def register(ctx: click.Context, application_id: str, token: str) -> None:
    """Upload the command table, replacing existing global commands."""
    registrar = CommandRegistrar(application_id, token, ctx.obj["audit_logger"])
    try:
        registered = asyncio.run(registrar.register(command_definitions()))
    except RegistrationError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(registered, indent=2))


@cli.command("commands")
def list_commands() -> None:
    """Print the command table as JSON."""
    output = [d.model_dump() for d in command_definitions()]
    click.echo(json.dumps(output, indent=2))


@cli.group("audit")
def audit_group() -> None:
    """Inspect audit logs."""


@audit_group.command("verify")
@click.argument("log_path", type=click.Path(exists=True, dir_okay=False))
def audit_verify(log_path: str) -> None:
    """Validate the hash chain of an audit log."""
    result = validate_audit_chain(Path(log_path))
    if not result.valid:
        click.echo(f"Chain broken at line {result.broken_at_line}", err=True)
        raise SystemExit(1)
    click.echo(f"Chain intact ({result.entries} entries)")
