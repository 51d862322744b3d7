"""Shared pytest fixtures: an in-memory audio backend and transport."""

import asyncio

import pytest

from voicerelay.config import get_config
from voicerelay.audio.types import AudioMode, PermissionResponse, PlayableAudio, RecordingStatus
from voicerelay.errors import AudioSubsystemFailure
from voicerelay.screen import AudioRecorderScreen

SERVER_URL = "ws://localhost:8000/ws/audio"


class FakeRecording:
    """Stands in for a device capture session."""

    def __init__(self, uri: str, fail_start: bool = False, fail_stop: bool = False):
        self.uri = uri
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.callback = None
        self.started = False
        self.unloaded = False

    def set_on_recording_status_update(self, callback):
        self.callback = callback

    async def start(self):
        if self.fail_start:
            raise AudioSubsystemFailure("device busy")
        self.started = True

    async def stop_and_unload(self):
        if self.fail_stop:
            raise AudioSubsystemFailure("device vanished")
        self.unloaded = True

    def get_uri(self):
        return self.uri

    def finish(self):
        """Simulate the device reaching its maximum duration."""
        self.callback(RecordingStatus(is_recording=False, is_done_recording=True, duration_ms=1000))


class FakePlayer:
    """Records load/play calls instead of touching a device."""

    def __init__(self, fail_load: bool = False):
        self.fail_load = fail_load
        self.loaded: list[PlayableAudio] = []
        self.plays = 0
        self.unloads = 0

    async def load(self, source: PlayableAudio):
        if self.fail_load:
            raise AudioSubsystemFailure("cannot decode")
        self.loaded.append(source)

    async def play(self):
        self.plays += 1

    async def unload(self):
        self.unloads += 1


class FakeBackend:
    """AudioBackend that hands out FakeRecording sessions."""

    def __init__(self, granted: bool = True):
        self.granted = granted
        self.permission_requests = 0
        self.recordings: list[FakeRecording] = []
        self.audio_modes: list[AudioMode] = []
        self.player = FakePlayer()
        self.fail_create = False
        self.fail_audio_mode = False
        self.recording_options = {}

    async def request_permissions(self):
        self.permission_requests += 1
        return PermissionResponse(
            granted=self.granted, status="granted" if self.granted else "denied"
        )

    async def set_audio_mode(self, mode: AudioMode):
        if self.fail_audio_mode:
            raise AudioSubsystemFailure("no such device")
        self.audio_modes.append(mode)

    async def create_recording(self, preset):
        if self.fail_create:
            raise AudioSubsystemFailure("cannot open input stream")
        recording = FakeRecording(
            uri=f"file:///tmp/voicerelay/recording-{len(self.recordings)}.wav",
            **self.recording_options,
        )
        self.recordings.append(recording)
        return recording

    def create_player(self):
        return self.player


class FakeTransport:
    """Records outbound messages instead of talking to a socket."""

    def __init__(self, is_open: bool = True):
        self.is_open = is_open
        self.sent: list = []

    async def send(self, value) -> bool:
        if not self.is_open:
            return False
        self.sent.append(value)
        return True

    def open(self):
        return None

    async def close(self):
        self.is_open = False


async def wait_until(predicate, timeout: float = 2.0):
    """Poll ``predicate`` on the event loop until it holds or time runs out."""

    async def _poll():
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout=timeout)


@pytest.fixture(autouse=True)
def fresh_config():
    """Drop the cached config so env changes in one test never leak."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def screen(backend):
    return AudioRecorderScreen(backend, server_url=SERVER_URL)


@pytest.fixture
def transport(screen):
    """Replace the screen's socket with an open in-memory transport."""
    fake = FakeTransport(is_open=True)
    screen.bridge.transport = fake
    return fake
