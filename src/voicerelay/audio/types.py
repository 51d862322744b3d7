"""
Device audio protocols.

These abstract the device audio subsystem (permission prompt, recorder,
player) so the recorder screen can run against sounddevice, a fake in
tests, or any other backend.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, runtime_checkable

WAV_MIME_TYPE = "audio/wav"


@dataclass(frozen=True)
class RecordingPreset:
    """Fixed capture settings for a recording."""

    name: str
    sample_rate: int
    channels: int
    sample_width: int = 2  # bytes, 16-bit PCM
    block_size: int = 1024
    max_duration_s: float = 300.0


@dataclass(frozen=True)
class RecordingStatus:
    """Snapshot reported by a recording to its status-update callback."""

    is_recording: bool
    is_done_recording: bool
    duration_ms: int = 0


@dataclass(frozen=True)
class PermissionResponse:
    granted: bool
    status: str = "undetermined"


@dataclass(frozen=True)
class AudioMode:
    """Process-wide audio settings applied once when the screen mounts."""

    allows_recording: bool = True
    input_device: Optional[str] = None
    output_device: Optional[str] = None
    latency: str = "low"


@dataclass(frozen=True)
class PlayableAudio:
    """Something the player can load: a file location or in-memory bytes."""

    uri: Optional[str] = None
    data: Optional[bytes] = None
    mime_type: str = WAV_MIME_TYPE

    def __post_init__(self):
        if (self.uri is None) == (self.data is None):
            raise ValueError("PlayableAudio needs exactly one of uri or data")


StatusCallback = Callable[[RecordingStatus], None]


@runtime_checkable
class Recording(Protocol):
    """A single capture session."""

    def set_on_recording_status_update(self, callback: Optional[StatusCallback]) -> None:
        """Register a callback fired on status changes, including natural completion."""
        ...

    async def start(self) -> None: ...

    async def stop_and_unload(self) -> None:
        """Finalize the capture and release the device."""
        ...

    def get_uri(self) -> Optional[str]:
        """Location string of the captured audio, once finalized."""
        ...


@runtime_checkable
class Player(Protocol):
    """A reusable playback object."""

    async def load(self, source: PlayableAudio) -> None: ...

    async def play(self) -> None: ...

    async def unload(self) -> None: ...


@runtime_checkable
class AudioBackend(Protocol):
    """Entry point into the device audio subsystem."""

    async def request_permissions(self) -> PermissionResponse: ...

    async def set_audio_mode(self, mode: AudioMode) -> None: ...

    async def create_recording(self, preset: RecordingPreset) -> Recording: ...

    def create_player(self) -> Player: ...
