"""Device audio layer: protocols, presets and the sounddevice backend."""

from voicerelay.audio.presets import HIGH_QUALITY, LOW_QUALITY, get_preset
from voicerelay.audio.types import (
    AudioBackend,
    AudioMode,
    PermissionResponse,
    PlayableAudio,
    Player,
    Recording,
    RecordingPreset,
    RecordingStatus,
)

__all__ = [
    "AudioBackend",
    "AudioMode",
    "HIGH_QUALITY",
    "LOW_QUALITY",
    "PermissionResponse",
    "PlayableAudio",
    "Player",
    "Recording",
    "RecordingPreset",
    "RecordingStatus",
    "get_preset",
]
