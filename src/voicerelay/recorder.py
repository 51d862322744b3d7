"""
Recording controller: microphone permission, start/stop of one capture at a
time, and handing the finished recording to the playback bridge.

Every failure stops here; callers only ever see the status line change.
"""

import asyncio
from typing import Optional

from voicerelay.audio.presets import HIGH_QUALITY
from voicerelay.audio.types import (
    AudioBackend,
    PlayableAudio,
    Recording,
    RecordingPreset,
    RecordingStatus,
)
from voicerelay.errors import PermissionDenied
from voicerelay.logger import get_logger
from voicerelay.playback import PlaybackBridge
from voicerelay.state import RecorderState, recorder_machine
from voicerelay import status as messages

logger = get_logger(__name__)

START_MARKER = "start"


class RecordingController:
    """Drives a single recording session through IDLE -> RECORDING -> IDLE.

    Args:
        backend: Device audio subsystem used for permissions and capture.
        bridge: Where the finished recording reference is sent.
        status: Status line updated on every lifecycle event.
        preset: Capture settings, fixed for every recording.
    """

    def __init__(
        self,
        backend: AudioBackend,
        bridge: PlaybackBridge,
        status: messages.StatusLine,
        preset: RecordingPreset = HIGH_QUALITY,
    ):
        self._backend = backend
        self._bridge = bridge
        self._status = status
        self._preset = preset
        self._machine = recorder_machine()
        self._recording: Optional[Recording] = None
        self._last_uri: Optional[str] = None
        self._completion_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> RecorderState:
        return self._machine.state

    @property
    def is_recording(self) -> bool:
        return self._machine.state is RecorderState.RECORDING

    @property
    def recording(self) -> Optional[Recording]:
        return self._recording

    @property
    def last_uri(self) -> Optional[str]:
        return self._last_uri

    async def start(self) -> None:
        if self._machine.state is not RecorderState.IDLE:
            logger.debug(f"start() ignored while {self._machine.state.value}")
            return

        self._machine.transition(RecorderState.STARTING)
        recording: Optional[Recording] = None
        try:
            self._status.set(messages.INITIALIZING)

            permission = await self._backend.request_permissions()
            if not permission.granted:
                raise PermissionDenied(f"Microphone permission {permission.status}")

            recording = await self._backend.create_recording(self._preset)
            recording.set_on_recording_status_update(self._on_recording_status)
            await recording.start()

        except PermissionDenied as e:
            logger.warning(str(e))
            self._status.set(messages.PERMISSION_DENIED)
            self._machine.transition(RecorderState.IDLE)
            return
        except Exception as e:
            logger.error(f"Recording error: {e}")
            self._status.set(messages.START_FAILED)
            if recording is not None:
                await self._discard(recording)
            self._machine.transition(RecorderState.IDLE)
            return

        self._recording = recording
        self._machine.transition(RecorderState.RECORDING)
        self._status.set(messages.RECORDING_STARTED)
        logger.info(f"Recording started ({self._preset.name})")

        if self._bridge.is_open:
            await self._bridge.send(START_MARKER)

    async def stop(self) -> None:
        if self._machine.state is not RecorderState.RECORDING or self._recording is None:
            return

        self._machine.transition(RecorderState.STOPPING)
        recording = self._recording
        try:
            await recording.stop_and_unload()
            uri = recording.get_uri()
            self._last_uri = uri
            self._bridge.set_playable(PlayableAudio(uri=uri))
            if await self._bridge.send(uri):
                self._status.set(messages.SENDING_CHUNK)
            self._status.set(messages.RECORDING_STOPPED)
            logger.info(f"Recording stopped: {uri}")
        except Exception as e:
            logger.error(f"Stop recording error: {e}")
            self._status.set(messages.STOP_FAILED)
        finally:
            self._recording = None
            self._machine.transition(RecorderState.IDLE)

    async def toggle(self) -> None:
        if self.is_recording:
            await self.stop()
        else:
            await self.start()

    def _on_recording_status(self, status: RecordingStatus) -> None:
        if status.is_done_recording and self.is_recording:
            logger.debug(f"Device finished recording after {status.duration_ms}ms")
            self._completion_task = asyncio.get_running_loop().create_task(self.stop())

    async def _discard(self, recording: Recording) -> None:
        try:
            await recording.stop_and_unload()
        except Exception as e:
            logger.warning(f"Could not release failed recording: {e}")
