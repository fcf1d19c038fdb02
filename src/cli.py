"""Click CLI for running the chat bridge and talking to it."""

from __future__ import annotations

import asyncio
import logging

import click
import uvicorn

from src.audit.logger import AuditLogger
from src.client.session import ChatSession
from src.client.state import Sender, TranscriptEntry
from src.gateway.forwarder import WEBHOOK_URL_ENV, ForwardingGateway
from src.proxy.app import create_app

QUIT_COMMANDS = {"/quit", "/exit"}
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Python logging level.",
)
def cli(log_level: str) -> None:
    """Webhook chat bridge."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--webhook-url", envvar=WEBHOOK_URL_ENV, default=None, help="External webhook address.")
@click.option("--audit-log", envvar="AUDIT_LOG_PATH", default=None, help="Audit log file path.")
def serve(host: str, port: int, webhook_url: str | None, audit_log: str | None) -> None:
    """Run the gateway HTTP service."""
    audit_logger = AuditLogger.from_env(audit_log) if audit_log else None
    gateway = ForwardingGateway(webhook_url, audit_logger=audit_logger)
    if not gateway.configured:
        raise click.UsageError(
            f"{WEBHOOK_URL_ENV} is not configured. Pass --webhook-url or set the variable.",
        )
    uvicorn.run(create_app(gateway), host=host, port=port)


@cli.command()
@click.argument("message")
@click.option("--url", default="http://127.0.0.1:8000", show_default=True, help="Gateway base URL.")
def send(message: str, url: str) -> None:
    """Send one message and print the reply."""
    if not message.strip():
        raise click.UsageError("Message is required")
    session = ChatSession(base_url=url)
    entry = asyncio.run(session.send(message))
    if entry is None:
        click.echo(f"Error: {session.error}", err=True)
        raise SystemExit(1)
    click.echo(entry.text)


@cli.command()
@click.option("--url", default="http://127.0.0.1:8000", show_default=True, help="Gateway base URL.")
def chat(url: str) -> None:
    """Interactive chat; /quit or EOF to leave."""
    session = ChatSession(base_url=url)
    click.echo("Start a conversation. Type /quit to leave.")
    while True:
        try:
            text = click.prompt("You", prompt_suffix="> ", default="", show_default=False)
        except (EOFError, click.Abort):
            break
        if text.strip() in QUIT_COMMANDS:
            break
        if not text.strip():
            continue
        entry = asyncio.run(session.send(text))
        if entry is not None:
            click.echo(render_entry(entry))
        elif session.error:
            click.secho(f"Error: {session.error}", fg="red", err=True)


def render_entry(entry: TranscriptEntry) -> str:
    who = "AI" if entry.sender is Sender.BOT else "You"
    return f"[{entry.timestamp.astimezone():%H:%M}] {who}: {entry.text}"


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
