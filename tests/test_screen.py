"""
Tests for mounting, unmounting and the status line of the recorder screen.
"""

from unittest.mock import patch

import pytest

from voicerelay.audio.presets import LOW_QUALITY
from voicerelay.audio.types import AudioMode
from voicerelay.config import Config
from voicerelay.screen import AudioRecorderScreen
from voicerelay.status import StatusLine
from voicerelay import status as messages


class TestStatusLine:
    """Test the single status line."""

    def test_overwrites(self):
        line = StatusLine()
        line.set("one")
        line.set("two")
        assert line.text == "two"
        assert str(line) == "two"

    def test_listeners(self):
        line = StatusLine()
        seen = []
        unsubscribe = line.subscribe(seen.append)
        line.set("a")
        unsubscribe()
        line.set("b")
        assert seen == ["a"]


class TestMount:
    """Test mounting and unmounting the screen."""

    @pytest.mark.asyncio
    async def test_mount_applies_audio_mode_and_connects(self, backend, screen, transport):
        with patch.object(transport, "open") as mock_open:
            await screen.mount()

        assert backend.audio_modes == [screen.audio_mode]
        mock_open.assert_called_once()
        assert screen.is_mounted

    @pytest.mark.asyncio
    async def test_audio_mode_failure_keeps_mounting(self, backend, screen, transport):
        backend.fail_audio_mode = True

        with patch.object(transport, "open") as mock_open:
            await screen.mount()

        assert screen.status.text == messages.AUDIO_MODE_FAILED
        mock_open.assert_called_once()

    @pytest.mark.asyncio
    async def test_mount_twice_opens_once(self, screen, transport):
        with patch.object(transport, "open") as mock_open:
            await screen.mount()
            await screen.mount()

        mock_open.assert_called_once()

    @pytest.mark.asyncio
    async def test_unmount_closes_transport_and_player(self, backend, screen, transport):
        await screen.mount()
        await screen.unmount()

        assert transport.is_open is False
        assert backend.player.unloads == 1
        assert not screen.is_mounted

    @pytest.mark.asyncio
    async def test_unmount_stops_active_recording_first(self, backend, screen, transport):
        await screen.mount()
        await screen.start()
        uri = backend.recordings[0].uri

        await screen.unmount()

        assert backend.recordings[0].unloaded
        assert not screen.is_recording
        assert transport.sent == ["start", uri]
        assert transport.is_open is False

    @pytest.mark.asyncio
    async def test_unmount_before_mount_is_noop(self, backend, screen, transport):
        await screen.unmount()
        assert transport.is_open is True
        assert backend.player.unloads == 0


class TestFromConfig:
    """Test building a screen from settings."""

    def test_builds_sounddevice_screen(self, tmp_path):
        try:
            import voicerelay.audio.audio_io  # noqa: F401
        except OSError:
            pytest.skip("PortAudio library not available")

        config = Config(
            server_url="ws://example.test:8000/ws/audio",
            recordings_dir=tmp_path,
            recording_preset="low_quality",
            input_device="2",
            latency="high",
        )

        with patch("voicerelay.audio.audio_io.SoundDeviceBackend") as mock_backend_cls:
            screen = AudioRecorderScreen.from_config(config)

        mock_backend_cls.assert_called_once_with(
            recordings_dir=tmp_path,
            input_device="2",
            output_device=None,
            preset=LOW_QUALITY,
        )
        assert screen.bridge.transport.url == "ws://example.test:8000/ws/audio"
        assert screen.controller._preset is LOW_QUALITY
        assert screen.audio_mode == AudioMode(input_device="2", latency="high")
