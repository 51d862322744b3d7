"""
voicerelay CLI.

This package splits CLI commands into focused modules:
- main:   run, devices
- config: show, get
"""

import typer

from voicerelay.cli.config import config_app
from voicerelay.cli.main import configure_logging, register_commands

app = typer.Typer(help="voicerelay - record, relay and play back audio over a WebSocket")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    voicerelay - record, relay and play back audio over a WebSocket.
    """
    configure_logging(verbose)


register_commands(app)

app.add_typer(config_app, name="config")

if __name__ == "__main__":
    app()
