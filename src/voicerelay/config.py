"""
Runtime configuration via pydantic-settings.

Every field can be overridden with an environment variable named
``VOICERELAY_<FIELD>`` or from a ``.env`` file in the working directory.
Use ``get_config()`` to obtain the cached instance; nothing is read at import.
"""

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVER_URL = "ws://localhost:8000/ws/audio"


class Config(BaseSettings):
    """Settings for the recorder screen, its socket and the audio backend."""

    model_config = SettingsConfigDict(
        env_prefix="VOICERELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    server_url: str = DEFAULT_SERVER_URL
    recordings_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "voicerelay"
    )
    recording_preset: str = "HIGH_QUALITY"
    input_device: Optional[str] = None
    output_device: Optional[str] = None
    latency: str = "low"
    log_level: str = "INFO"
    log_file: Optional[Path] = None  # extra DEBUG sink, rotated at 10 MB

    @field_validator("server_url")
    @classmethod
    def _check_ws_scheme(cls, value: str) -> str:
        if not value.startswith(("ws://", "wss://")):
            raise ValueError(f"server_url must be a ws:// or wss:// URL, got {value!r}")
        return value

    @field_validator("latency")
    @classmethod
    def _check_latency(cls, value: str) -> str:
        if value not in ("low", "high"):
            raise ValueError("latency must be 'low' or 'high'")
        return value


@lru_cache
def get_config() -> Config:
    """Return the process-wide config, loading it on first use."""
    return Config()
