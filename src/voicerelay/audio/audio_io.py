"""
Device audio backend using sounddevice.

Recordings stream 16-bit PCM from the default (or configured) microphone
into a WAV file; the player decodes WAV bytes and hands them to
``sounddevice.play``.
"""

import asyncio
import uuid
import wave
from pathlib import Path
from typing import Optional

import numpy as np
import sounddevice as sd

from voicerelay.audio.presets import HIGH_QUALITY
from voicerelay.audio.types import (
    AudioMode,
    PermissionResponse,
    PlayableAudio,
    RecordingPreset,
    RecordingStatus,
    StatusCallback,
)
from voicerelay.audio.wav import decode_wav, read_source
from voicerelay.errors import AudioSubsystemFailure
from voicerelay.logger import get_logger

logger = get_logger(__name__)


def parse_device(value: Optional[str]):
    """sounddevice takes either a device index or a name substring."""
    if value is None or value == "":
        return None
    return int(value) if value.isdigit() else value


class SoundDeviceRecording:
    """One capture session writing to a WAV file.

    The input callback runs on the PortAudio thread. When ``max_duration_s``
    is reached the stream stops itself and the status callback is scheduled
    on the event loop that prepared the recording.
    """

    def __init__(self, preset: RecordingPreset, path: Path, device=None):
        self._preset = preset
        self._path = path
        self._device = device
        self._stream: Optional[sd.InputStream] = None
        self._wav: Optional[wave.Wave_write] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._callback: Optional[StatusCallback] = None
        self._frames = 0
        self._max_frames = int(preset.max_duration_s * preset.sample_rate)
        self._stopping = False
        self._unloaded = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def duration_ms(self) -> int:
        return int(self._frames * 1000 / self._preset.sample_rate)

    def set_on_recording_status_update(self, callback: Optional[StatusCallback]) -> None:
        self._callback = callback

    async def prepare(self) -> None:
        """Open the WAV file and the input stream without starting capture."""
        self._loop = asyncio.get_running_loop()
        try:
            self._wav, self._stream = await asyncio.to_thread(self._open)
        except Exception as e:
            raise AudioSubsystemFailure(f"Could not prepare recording: {e}") from e
        logger.debug(
            f"Prepared {self._preset.name} recording at {self._path} "
            f"({self._preset.sample_rate}Hz, {self._preset.channels}ch)"
        )

    def _open(self):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        wav = wave.open(str(self._path), "wb")
        wav.setnchannels(self._preset.channels)
        wav.setsampwidth(self._preset.sample_width)
        wav.setframerate(self._preset.sample_rate)
        try:
            stream = sd.InputStream(
                samplerate=self._preset.sample_rate,
                channels=self._preset.channels,
                dtype="int16",
                blocksize=self._preset.block_size,
                device=self._device,
                callback=self._on_audio,
                finished_callback=self._on_finished,
            )
        except Exception:
            wav.close()
            raise
        return wav, stream

    def _on_audio(self, indata, frames, time, status):
        if status:
            logger.warning(f"Audio input status: {status}")
        self._wav.writeframesraw(indata.tobytes())
        self._frames += frames
        if self._frames >= self._max_frames:
            raise sd.CallbackStop

    def _on_finished(self):
        # Also fires after a manual stop; only natural completion is reported
        if self._stopping:
            return
        logger.info(f"Recording reached its {self._preset.max_duration_s:.0f}s limit")
        self._notify(
            RecordingStatus(
                is_recording=False,
                is_done_recording=True,
                duration_ms=self.duration_ms,
            )
        )

    def _notify(self, status: RecordingStatus) -> None:
        if self._callback is None or self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._callback, status)

    async def start(self) -> None:
        if self._stream is None:
            await self.prepare()
        try:
            await asyncio.to_thread(self._stream.start)
        except Exception as e:
            raise AudioSubsystemFailure(f"Could not start recording: {e}") from e
        self._notify(RecordingStatus(is_recording=True, is_done_recording=False))

    async def stop_and_unload(self) -> None:
        if self._unloaded:
            raise AudioSubsystemFailure("Recording has already been unloaded")
        self._stopping = True
        try:
            await asyncio.to_thread(self._close)
        except Exception as e:
            raise AudioSubsystemFailure(f"Could not stop recording: {e}") from e
        finally:
            self._unloaded = True
        logger.info(f"Recording finalized: {self.duration_ms}ms -> {self._path}")

    def _close(self):
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
        if self._wav is not None:
            self._wav.close()

    def get_uri(self) -> Optional[str]:
        return self._path.resolve().as_uri()


class SoundDevicePlayer:
    """Reusable player: ``load`` replaces whatever was loaded before."""

    def __init__(self, device=None):
        self._device = device
        self._samples: Optional[np.ndarray] = None
        self._sample_rate: Optional[int] = None

    @property
    def is_loaded(self) -> bool:
        return self._samples is not None

    async def load(self, source: PlayableAudio) -> None:
        raw = await asyncio.to_thread(read_source, source)
        samples, rate = decode_wav(raw)
        await self.unload()
        self._samples = samples
        self._sample_rate = rate
        logger.debug(f"Loaded {len(samples)} frames at {rate}Hz")

    async def play(self) -> None:
        if self._samples is None:
            raise AudioSubsystemFailure("Nothing loaded to play")
        try:
            await asyncio.to_thread(
                sd.play, self._samples, self._sample_rate, device=self._device
            )
        except Exception as e:
            raise AudioSubsystemFailure(f"Playback failed: {e}") from e

    async def unload(self) -> None:
        if self._samples is None:
            return
        await asyncio.to_thread(sd.stop)
        self._samples = None
        self._sample_rate = None


class SoundDeviceBackend:
    """AudioBackend backed by PortAudio through sounddevice."""

    def __init__(
        self,
        recordings_dir: Path,
        input_device: Optional[str] = None,
        output_device: Optional[str] = None,
        preset: RecordingPreset = HIGH_QUALITY,
    ):
        self.recordings_dir = Path(recordings_dir)
        self.preset = preset
        self._input_device = parse_device(input_device)
        self._output_device = parse_device(output_device)
        self._allows_recording = True

    async def request_permissions(self) -> PermissionResponse:
        granted = await asyncio.to_thread(self._check_microphone)
        return PermissionResponse(
            granted=granted,
            status="granted" if granted else "denied",
        )

    def _check_microphone(self) -> bool:
        if not self._allows_recording:
            logger.debug("Recording disabled by audio mode")
            return False
        try:
            test_stream = sd.InputStream(
                channels=self.preset.channels,
                samplerate=self.preset.sample_rate,
                blocksize=self.preset.block_size,
                dtype="int16",
                device=self._input_device,
            )
            test_stream.close()
            logger.debug(f"Microphone access test passed ({self.preset.name})")
            return True
        except Exception as e:
            logger.debug(f"Microphone access test failed: {e}")
            return False

    async def set_audio_mode(self, mode: AudioMode) -> None:
        if mode.input_device is not None:
            self._input_device = parse_device(mode.input_device)
        if mode.output_device is not None:
            self._output_device = parse_device(mode.output_device)
        self._allows_recording = mode.allows_recording

        def _apply():
            current_in, current_out = sd.default.device
            sd.default.device = (
                current_in if self._input_device is None else self._input_device,
                current_out if self._output_device is None else self._output_device,
            )
            sd.default.latency = mode.latency
            if self._input_device is not None:
                sd.check_input_settings(device=self._input_device)
            if self._output_device is not None:
                sd.check_output_settings(device=self._output_device)

        try:
            await asyncio.to_thread(_apply)
        except Exception as e:
            raise AudioSubsystemFailure(f"Could not apply audio mode: {e}") from e

    async def create_recording(self, preset: RecordingPreset) -> SoundDeviceRecording:
        path = self.recordings_dir / f"recording-{uuid.uuid4().hex}.wav"
        recording = SoundDeviceRecording(preset, path, device=self._input_device)
        await recording.prepare()
        return recording

    def create_player(self) -> SoundDevicePlayer:
        return SoundDevicePlayer(device=self._output_device)


def list_devices() -> list[dict]:
    """All PortAudio devices as plain dicts."""
    return [dict(device) for device in sd.query_devices()]
