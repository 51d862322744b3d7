"""
Top-level commands: the interactive recorder screen and device listing.

Usage:
    voicerelay run [--url URL] [--preset NAME]
    voicerelay devices
"""

import asyncio
from typing import Awaitable, Callable, Optional

import typer

from voicerelay.logger import get_logger, setup_logging
from voicerelay.screen import HEADER, AudioRecorderScreen

logger = get_logger(__name__)

QUIT_COMMANDS = ("q", "quit", "exit")


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    from pydantic import ValidationError

    from voicerelay.config import get_config

    try:
        config = get_config()
    except ValidationError as e:
        # Commands that never touch the config (e.g. devices) must still run
        setup_logging(level="DEBUG" if verbose else None)
        logger.warning(f"Ignoring invalid configuration: {e}")
        return

    setup_logging(
        level="DEBUG" if verbose else config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
    )


def render(screen: AudioRecorderScreen) -> None:
    """Draw the screen: header, status line, toggle and (maybe) play."""
    typer.secho(f"\n{HEADER}", bold=True)
    typer.echo(f"Status: {screen.status.text}")
    typer.secho(f"  [r] {screen.toggle_label}", fg=screen.toggle_color)
    if screen.can_play:
        typer.secho("  [p] Play Processed Audio", fg="blue")
    typer.echo("  [q] Quit")


async def handle_command(screen: AudioRecorderScreen, command: str) -> bool:
    """Apply one keypress. Returns False when the user wants to leave."""
    command = command.strip().lower()
    if command in QUIT_COMMANDS:
        if screen.is_recording:
            await screen.stop()
        return False
    if command == "r":
        await screen.toggle()
    elif command == "p" and screen.can_play:
        await screen.play()
    elif command:
        typer.echo(f"Unknown command: {command}")
    return True


async def _prompt() -> str:
    try:
        return await asyncio.to_thread(input, "> ")
    except EOFError:
        return "q"


async def run_screen(
    screen: AudioRecorderScreen,
    read_command: Optional[Callable[[], Awaitable[str]]] = None,
) -> None:
    """Mount the screen and drive it from user commands until quit."""
    read = read_command or _prompt

    async with screen:
        unsubscribe = screen.status.subscribe(lambda text: typer.echo(f"Status: {text}"))
        screen.bridge.on_playable_changed(
            lambda playable: logger.debug(f"Playable audio updated ({playable.mime_type})")
        )
        try:
            while True:
                render(screen)
                if not await handle_command(screen, await read()):
                    break
        finally:
            unsubscribe()


def run(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="WebSocket server URL"),
    preset: Optional[str] = typer.Option(
        None, "--preset", help="Recording preset (HIGH_QUALITY or LOW_QUALITY)"
    ),
):
    """Open the recorder screen."""
    from voicerelay.config import Config

    overrides = {}
    if url:
        overrides["server_url"] = url
    if preset:
        overrides["recording_preset"] = preset

    try:
        config = Config(**overrides)
        screen = AudioRecorderScreen.from_config(config)
    except ValueError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"🎙️  Connecting to {config.server_url}")
    try:
        asyncio.run(run_screen(screen))
    except KeyboardInterrupt:
        typer.echo("\nShutting down...")


def devices():
    """List audio input and output devices."""
    from voicerelay.audio.audio_io import list_devices

    found = list_devices()
    if not found:
        typer.echo("No audio devices found.")
        return

    typer.echo(f"🔊 Audio devices ({len(found)}):\n")
    for index, device in enumerate(found):
        inputs = device.get("max_input_channels", 0)
        outputs = device.get("max_output_channels", 0)
        typer.echo(f"  [{index}] {device.get('name', 'unknown')}  (in: {inputs}, out: {outputs})")


def register_commands(app: typer.Typer):
    """Register top-level commands on the given app."""
    app.command("run")(run)
    app.command("devices")(devices)
