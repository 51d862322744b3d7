"""
The recorder screen: one status line, one recording controller and one
playback bridge, mounted and unmounted together.
"""

from typing import Optional

from voicerelay.audio.presets import HIGH_QUALITY, get_preset
from voicerelay.audio.types import AudioBackend, AudioMode, RecordingPreset
from voicerelay.config import DEFAULT_SERVER_URL, Config, get_config
from voicerelay.logger import get_logger
from voicerelay.playback import PlaybackBridge
from voicerelay.recorder import RecordingController
from voicerelay.status import AUDIO_MODE_FAILED, StatusLine

logger = get_logger(__name__)

HEADER = "Audio Recorder"


class AudioRecorderScreen:
    """Session object owning every piece of mutable screen state.

    Use as an async context manager, or call ``mount``/``unmount`` directly.
    """

    def __init__(
        self,
        backend: AudioBackend,
        server_url: str = DEFAULT_SERVER_URL,
        preset: RecordingPreset = HIGH_QUALITY,
        audio_mode: Optional[AudioMode] = None,
    ):
        self.backend = backend
        self.audio_mode = audio_mode or AudioMode()
        self.status = StatusLine()
        self.bridge = PlaybackBridge(server_url, backend.create_player(), self.status)
        self.controller = RecordingController(backend, self.bridge, self.status, preset)
        self._mounted = False

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "AudioRecorderScreen":
        config = config or get_config()
        preset = get_preset(config.recording_preset)

        from voicerelay.audio.audio_io import SoundDeviceBackend

        backend = SoundDeviceBackend(
            recordings_dir=config.recordings_dir,
            input_device=config.input_device,
            output_device=config.output_device,
            preset=preset,
        )
        mode = AudioMode(
            input_device=config.input_device,
            output_device=config.output_device,
            latency=config.latency,
        )
        return cls(
            backend,
            server_url=config.server_url,
            preset=preset,
            audio_mode=mode,
        )

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def is_recording(self) -> bool:
        return self.controller.is_recording

    @property
    def can_play(self) -> bool:
        return self.bridge.playable is not None

    @property
    def toggle_label(self) -> str:
        return "Stop Recording" if self.is_recording else "Start Recording"

    @property
    def toggle_color(self) -> str:
        return "red" if self.is_recording else "green"

    async def mount(self) -> None:
        if self._mounted:
            logger.warning("Screen is already mounted")
            return
        self._mounted = True

        try:
            await self.backend.set_audio_mode(self.audio_mode)
        except Exception as e:
            logger.error(f"Error setting audio mode: {e}")
            self.status.set(AUDIO_MODE_FAILED)

        self.bridge.connect()

    async def unmount(self) -> None:
        if not self._mounted:
            return
        await self.controller.stop()
        await self.bridge.disconnect()
        await self.bridge.release()
        self._mounted = False

    async def start(self) -> None:
        await self.controller.start()

    async def stop(self) -> None:
        await self.controller.stop()

    async def toggle(self) -> None:
        await self.controller.toggle()

    async def play(self) -> bool:
        return await self.bridge.play()

    async def __aenter__(self) -> "AudioRecorderScreen":
        await self.mount()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.unmount()
