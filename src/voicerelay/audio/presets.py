"""Recording presets."""

from voicerelay.audio.types import RecordingPreset

HIGH_QUALITY = RecordingPreset(
    name="HIGH_QUALITY",
    sample_rate=44100,
    channels=2,
)

LOW_QUALITY = RecordingPreset(
    name="LOW_QUALITY",
    sample_rate=22050,
    channels=1,
)

PRESETS = {preset.name: preset for preset in (HIGH_QUALITY, LOW_QUALITY)}


def get_preset(name: str) -> RecordingPreset:
    """Look up a preset by name (case-insensitive)."""
    try:
        return PRESETS[name.upper()]
    except KeyError:
        raise ValueError(
            f"Unknown recording preset {name!r}; choose from {', '.join(PRESETS)}"
        ) from None
