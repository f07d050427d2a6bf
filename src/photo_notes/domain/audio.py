"""Audio playback models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AudioPlaybackResult:
    """Outcome of asking the device to play an audio URL."""

    success: bool
    error: str | None = None
    duration_ms: int | None = None
