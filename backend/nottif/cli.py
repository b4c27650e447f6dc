"""Nottif command line: one-shot sends and the web service."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer

from nottif import __version__
from nottif.config import NottifConfig, Settings, settings
from nottif.models.identity import Identity
from nottif.services.notifier import Notifier
from nottif.utils.errors import NotifierError

app = typer.Typer(
    help="Discord webhook notifications with cron jobs and a live event log.",
    no_args_is_help=True,
    add_completion=False,
)


def read_piped_input() -> str:
    """Message piped on stdin, or empty when stdin is a terminal."""
    if sys.stdin is None or sys.stdin.isatty():
        return ""
    return sys.stdin.read().strip()


def webhook_from_config(config_path: Path) -> str:
    """Webhook URL stored in the service config file, empty if there is none."""
    if not config_path.is_file():
        return ""
    raw = config_path.read_text(encoding="utf-8")
    if not raw.strip():
        return ""
    return NottifConfig.model_validate_json(raw).webhook_url


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.command()
def send(
    message: Optional[str] = typer.Argument(None, help="Message to send (read from stdin when omitted)"),
    webhook: Optional[str] = typer.Option(None, "--webhook", "-w", help="Discord webhook URL"),
    config: Path = typer.Option(settings.config_path, "--config", "-c", help="Service config file with the webhook URL"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Sender name shown in Discord"),
) -> None:
    """Send a single markdown message."""
    message = message or read_piped_input()
    if not message:
        _fail("No message provided. Either pipe input or provide a message argument")

    if not webhook:
        try:
            webhook = webhook_from_config(config)
        except (OSError, ValueError) as e:
            _fail(f"cannot read webhook from {config}: {e}")
    if not webhook:
        _fail("webhook URL not found in config file or command line arguments")

    notifier = Notifier(webhook)

    async def _send() -> None:
        try:
            await notifier.send(message, Identity(username=username))
        finally:
            await notifier.close()

    try:
        asyncio.run(_send())
    except NotifierError as e:
        _fail(str(e))

    typer.echo("Notification sent")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listen port"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Run the web service with the cron scheduler and live event stream."""
    import uvicorn
    from nottif.main import create_app

    overrides = {"host": host, "port": port, "config_path": config}
    run_settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    uvicorn.run(create_app(run_settings), host=run_settings.host, port=run_settings.port)


@app.command()
def version() -> None:
    """Print the version."""
    typer.echo(__version__)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
