"""
Playback side of the screen: the inbound chunk buffer, the socket that
fills it and the single reusable player.
"""

from typing import Callable, Optional

from voicerelay.audio.types import WAV_MIME_TYPE, PlayableAudio, Player
from voicerelay.errors import TransportError
from voicerelay.logger import get_logger
from voicerelay.status import PLAYBACK_FAILED, SOCKET_ERROR, StatusLine
from voicerelay.transport import AudioTransport, Payload

logger = get_logger(__name__)


class PlaybackBuffer:
    """Append-only list of received chunks.

    Every append rebuilds the playable reference from all chunks so far, so
    the reference always covers the full stream received up to that point.
    """

    def __init__(self, mime_type: str = WAV_MIME_TYPE):
        self.mime_type = mime_type
        self._chunks: list[bytes] = []
        self._assembled: Optional[PlayableAudio] = None

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def chunks(self) -> tuple[bytes, ...]:
        return tuple(self._chunks)

    @property
    def assembled(self) -> Optional[PlayableAudio]:
        return self._assembled

    @property
    def size(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)

    def append(self, chunk: Payload) -> PlayableAudio:
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        self._chunks.append(bytes(chunk))
        self._assembled = PlayableAudio(data=b"".join(self._chunks), mime_type=self.mime_type)
        return self._assembled


class PlaybackBridge:
    """Owns the connection, the chunk buffer, the player and the playable reference."""

    def __init__(self, server_url: str, player: Player, status: StatusLine):
        self._player = player
        self._status = status
        self._playable: Optional[PlayableAudio] = None
        self._listeners: list[Callable[[PlayableAudio], None]] = []
        self.buffer = PlaybackBuffer()
        self.transport = AudioTransport(
            server_url,
            on_message=self._handle_message,
            on_error=self._handle_error,
        )

    @property
    def playable(self) -> Optional[PlayableAudio]:
        return self._playable

    @property
    def is_open(self) -> bool:
        return self.transport.is_open

    def on_playable_changed(self, listener: Callable[[PlayableAudio], None]) -> None:
        self._listeners.append(listener)

    def set_playable(self, playable: PlayableAudio) -> None:
        """Replace the reference the Play action will load."""
        self._playable = playable
        for listener in list(self._listeners):
            try:
                listener(playable)
            except Exception as e:
                logger.error(f"Playable listener failed: {e}")

    def connect(self) -> None:
        self.transport.open()

    async def disconnect(self) -> None:
        await self.transport.close()

    async def send(self, value: Payload) -> bool:
        return await self.transport.send(value)

    def _handle_message(self, payload: Payload) -> None:
        playable = self.buffer.append(payload)
        logger.debug(f"Received chunk #{len(self.buffer)} ({self.buffer.size} bytes total)")
        self.set_playable(playable)

    def _handle_error(self, error: TransportError) -> None:
        self._status.set(SOCKET_ERROR)

    async def play(self) -> bool:
        """Load and play the current reference. Returns True if playback started."""
        playable = self._playable
        if playable is None:
            logger.debug("Nothing to play yet")
            return False

        try:
            await self._player.load(playable)
            await self._player.play()
        except Exception as e:
            logger.error(f"Audio playback error: {e}")
            self._status.set(PLAYBACK_FAILED)
            return False
        return True

    async def release(self) -> None:
        """Unload the player."""
        try:
            await self._player.unload()
        except Exception as e:
            logger.warning(f"Could not unload player: {e}")
