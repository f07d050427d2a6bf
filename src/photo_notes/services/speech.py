"""Spoken notifications played back on the headset."""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from photo_notes.domain.audio import AudioPlaybackResult

MAX_MESSAGE_LENGTH = 800
FALLBACK_AUDIO_URL = "https://okgodoit.com/cool.mp3"
VOICE_ID = "JBFqnCBsd6RMkjVDRZzb"
MODEL_ID = "eleven_multilingual_v2"
OUTPUT_FORMAT = "mp3_44100_128"
VOICE_SETTINGS: dict[str, object] = {
    "stability": 0.6,
    "similarity_boost": 0.8,
    "style": 0.2,
    "use_speaker_boost": True,
}

_logger = logging.getLogger(__name__)


class SpeechSynthesizer(Protocol):
    """Interface for text-to-speech providers."""

    async def synthesize(
        self,
        *,
        text: str,
        voice_id: str,
        model_id: str,
        output_format: str,
        voice_settings: dict[str, object],
    ) -> bytes:
        """Return encoded audio for the text."""


class AudioSink(Protocol):
    """Anything that can play an audio URL to the wearer."""

    async def play_audio(self, audio_url: str) -> AudioPlaybackResult:
        """Ask the device to play the audio at the URL."""


@dataclass
class SpeechNotifier:
    """Synthesize short messages and play them through a session."""

    synthesizer: SpeechSynthesizer
    audio_dir: Path
    base_url: str
    clip_ttl_seconds: float = 300
    _audio_files: dict[str, str] = field(default_factory=dict, init=False)
    _deletions: dict[str, asyncio.TimerHandle] = field(
        default_factory=dict, init=False
    )

    def __post_init__(self) -> None:
        self.audio_dir = Path(self.audio_dir)
        self.audio_dir.mkdir(parents=True, exist_ok=True)

    async def speak(self, session: AudioSink, text: str) -> None:
        """Speak a message, falling back to a static clip on failure."""
        if not text or not text.strip():
            _logger.warning("Empty message provided to speak")
            return
        message = text
        if len(message) > MAX_MESSAGE_LENGTH:
            message = message[:MAX_MESSAGE_LENGTH] + "..."
        _logger.info("Generating speech for: %r", message[:50])
        try:
            audio_id = await self._generate_audio(message)
            audio_url = f"{self.base_url}/api/audio/{audio_id}"
            _logger.info("Playing generated audio: url=%s", audio_url)
            result = await session.play_audio(audio_url)
            if result.success:
                _logger.info("Audio played: duration_ms=%s", result.duration_ms)
            else:
                _logger.error("Audio playback failed: %s", result.error)
        except Exception:
            _logger.exception("Speech generation failed, playing fallback audio")
            await self._play_fallback(session)

    async def _play_fallback(self, session: AudioSink) -> None:
        try:
            result = await session.play_audio(FALLBACK_AUDIO_URL)
        except Exception:
            _logger.exception("Fallback audio playback raised")
            return
        if not result.success:
            _logger.error("Fallback audio also failed: %s", result.error)

    async def _generate_audio(self, text: str) -> str:
        audio = await self.synthesizer.synthesize(
            text=text,
            voice_id=VOICE_ID,
            model_id=MODEL_ID,
            output_format=OUTPUT_FORMAT,
            voice_settings=VOICE_SETTINGS,
        )
        audio_id = uuid.uuid4().hex
        filename = f"{audio_id}.mp3"
        (self.audio_dir / filename).write_bytes(audio)
        self._audio_files[audio_id] = filename
        self._schedule_delete(audio_id)
        _logger.info("Audio generated: %s (%s bytes)", filename, len(audio))
        return audio_id

    def _schedule_delete(self, audio_id: str) -> None:
        loop = asyncio.get_running_loop()
        self._deletions[audio_id] = loop.call_later(
            self.clip_ttl_seconds, self.delete_audio, audio_id
        )

    def audio_path(self, audio_id: str) -> Path | None:
        """Return the clip path when it is tracked and still on disk."""
        filename = self._audio_files.get(audio_id)
        if filename is None:
            return None
        path = self.audio_dir / filename
        return path if path.exists() else None

    def delete_audio(self, audio_id: str) -> None:
        """Delete one clip; missing ids and files are ignored."""
        handle = self._deletions.pop(audio_id, None)
        if handle is not None:
            handle.cancel()
        filename = self._audio_files.pop(audio_id, None)
        if filename is None:
            return
        (self.audio_dir / filename).unlink(missing_ok=True)

    def cleanup_old_files(self, max_age_minutes: float = 30) -> int:
        """Delete clips older than the cutoff and return how many went."""
        cutoff = time.time() - max_age_minutes * 60
        if not self.audio_dir.exists():
            return 0
        removed = 0
        for path in self.audio_dir.iterdir():
            try:
                modified = path.stat().st_mtime
            except FileNotFoundError:
                continue
            if not path.is_file() or modified >= cutoff:
                continue
            path.unlink(missing_ok=True)
            self._forget(path.name)
            removed += 1
        return removed

    def _forget(self, filename: str) -> None:
        for audio_id, tracked in list(self._audio_files.items()):
            if tracked == filename:
                self._audio_files.pop(audio_id, None)
                handle = self._deletions.pop(audio_id, None)
                if handle is not None:
                    handle.cancel()
                break

    async def run_cleanup_loop(
        self, interval_seconds: float, max_age_minutes: float
    ) -> None:
        """Sweep stale clips forever at a fixed interval."""
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                removed = self.cleanup_old_files(max_age_minutes)
            except OSError:
                _logger.exception("Audio cleanup sweep failed")
                continue
            if removed:
                _logger.info("Audio cleanup removed %s stale clips", removed)

    def close(self) -> None:
        """Cancel scheduled deletions."""
        for handle in self._deletions.values():
            handle.cancel()
        self._deletions.clear()
