"""voicerelay: record microphone audio, relay it over a WebSocket, play the reply."""

from voicerelay.playback import PlaybackBridge, PlaybackBuffer
from voicerelay.recorder import RecordingController
from voicerelay.screen import AudioRecorderScreen
from voicerelay.transport import AudioTransport

__version__ = "0.1.0"

__all__ = [
    "AudioRecorderScreen",
    "AudioTransport",
    "PlaybackBridge",
    "PlaybackBuffer",
    "RecordingController",
]
