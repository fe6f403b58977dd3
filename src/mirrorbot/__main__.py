"""Command line entry point: run the server or check a milestone description."""

from __future__ import annotations

import sys

import click

from mirrorbot.backport import BackportSpecError, parse
from mirrorbot.config import ConfigError, Settings
from mirrorbot.logging import setup_logging


@click.group()
@click.version_option(package_name="mirrorbot")
def main() -> None:
    """mirrorbot - mirror pull requests to CI and track backports."""


@main.command()
@click.option("--host", default="0.0.0.0", help="Interface to listen on")
@click.option("--port", type=int, default=None, help="Port (default: $PORT or 8000)")
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Log directory (default: $MIRRORBOT_LOG_DIR or ./logs)",
)
@click.option("--log-level", default=None, help="Log level (default: $MIRRORBOT_LOG_LEVEL or INFO)")
def serve(host: str, port: int | None, log_dir: str | None, log_level: str | None) -> None:
    """Run the webhook server."""
    import uvicorn  # noqa: PLC0415

    from mirrorbot.api import create_app  # noqa: PLC0415

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    setup_logging(log_dir=log_dir, level=log_level)
    uvicorn.run(create_app(settings), host=host, port=port or settings.port)


@main.command("check-milestone")
@click.argument("description", required=False)
@click.option("--bot-name", default="coqbot", help="Prefix of the backport sentence")
def check_milestone(description: str | None, bot_name: str) -> None:
    """Validate the backport sentence of a milestone DESCRIPTION (default: stdin)."""
    if description is None:
        description = click.get_text_stream("stdin").read()
    try:
        spec = parse(description, bot_name)
    except BackportSpecError as e:
        click.echo(f"invalid: {e}", err=True)
        sys.exit(1)

    click.echo(f"backport to:              {spec.backport_to}")
    click.echo(f"request inclusion column: {spec.request_inclusion_column}")
    click.echo(f"backported column:        {spec.backported_column}")
    click.echo(f"rejected milestone:       {spec.rejected_milestone}")


if __name__ == "__main__":
    main()
