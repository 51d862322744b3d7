"""
The single status line shown to the user.

Only the latest event is kept; listeners are told about every change so the
UI shell can re-render.
"""

from typing import Callable

from voicerelay.logger import get_logger

logger = get_logger(__name__)

INITIALIZING = "Initializing recording..."
PERMISSION_DENIED = "Permission to access microphone denied"
RECORDING_STARTED = "Recording started..."
START_FAILED = "Error starting recording."
SENDING_CHUNK = "Sending audio chunk..."
RECORDING_STOPPED = "Recording stopped."
STOP_FAILED = "Error stopping recording."
PLAYBACK_FAILED = "Error playing audio."
SOCKET_ERROR = "WebSocket error."
AUDIO_MODE_FAILED = "Error setting audio mode."


class StatusLine:
    """Holds the most recent status message."""

    def __init__(self, text: str = ""):
        self._text = text
        self._listeners: list[Callable[[str], None]] = []

    @property
    def text(self) -> str:
        return self._text

    def set(self, text: str) -> None:
        self._text = text
        logger.debug(f"Status: {text}")
        for listener in list(self._listeners):
            listener(text)

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def __str__(self) -> str:
        return self._text
