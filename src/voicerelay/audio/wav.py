"""
WAV helpers shared by the recorder and the player.
"""

import io
import wave
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import numpy as np

from voicerelay.audio.types import PlayableAudio
from voicerelay.errors import AudioSubsystemFailure

_DTYPES = {1: np.uint8, 2: np.int16, 4: np.int32}


def uri_to_path(uri: str) -> Path:
    """Resolve a ``file://`` URI (or a bare path) to a filesystem path."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    if parsed.scheme == "" or len(parsed.scheme) == 1:  # bare path or drive letter
        return Path(uri)
    raise AudioSubsystemFailure(f"Unsupported audio location: {uri}")


def read_source(source: PlayableAudio) -> bytes:
    if source.data is not None:
        return source.data
    try:
        return uri_to_path(source.uri).read_bytes()
    except OSError as e:
        raise AudioSubsystemFailure(f"Cannot read {source.uri}: {e}") from e


def decode_wav(audio_bytes: bytes) -> tuple[np.ndarray, int]:
    """Decode WAV bytes into a (frames, channels) sample array and its rate."""
    if audio_bytes[:4] != b"RIFF":
        raise AudioSubsystemFailure("Audio is not a WAV (RIFF) payload")

    try:
        with wave.open(io.BytesIO(audio_bytes), "rb") as wf:
            channels = wf.getnchannels()
            sample_width = wf.getsampwidth()
            rate = wf.getframerate()
            pcm = wf.readframes(wf.getnframes())
    except (wave.Error, EOFError) as e:
        raise AudioSubsystemFailure(f"WAV decode failed: {e}") from e

    dtype = _DTYPES.get(sample_width)
    if dtype is None:
        raise AudioSubsystemFailure(f"Unsupported sample width: {sample_width} bytes")

    # Partial payloads can end mid-frame
    frame_bytes = sample_width * channels
    pcm = pcm[: len(pcm) - len(pcm) % frame_bytes]

    samples = np.frombuffer(pcm, dtype=dtype).reshape(-1, channels)
    return samples, rate
