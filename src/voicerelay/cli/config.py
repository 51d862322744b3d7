"""
CLI subcommands for viewing configuration.

Usage:
    voicerelay config show
    voicerelay config get <key>
"""

import json

import typer
from pydantic import ValidationError

config_app = typer.Typer(help="View voicerelay configuration")


def _config_dict() -> dict:
    from voicerelay.config import get_config

    try:
        return get_config().model_dump(mode="json")
    except ValidationError as e:
        typer.echo(f"❌ Invalid configuration: {e}")
        raise typer.Exit(code=1)


@config_app.command("show")
def config_show():
    """Dump the effective configuration (defaults + VOICERELAY_* overrides)."""
    typer.echo(json.dumps(_config_dict(), indent=2))


@config_app.command("get")
def config_get(
    key: str = typer.Argument(help="Configuration key to read"),
):
    """Read a specific configuration value."""
    data = _config_dict()
    if key not in data:
        typer.echo(f"❌ Key '{key}' not found in config")
        raise typer.Exit(code=1)

    value = data[key]
    typer.echo("" if value is None else str(value))
