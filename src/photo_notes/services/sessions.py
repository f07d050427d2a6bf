"""Per-user coordination of button, transcription and lifecycle events."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from photo_notes.domain.audio import AudioPlaybackResult
from photo_notes.domain.photos import PhotoData, StoredPhoto
from photo_notes.domain.sessions import UserSession
from photo_notes.services.commands import CommandKind, parse_command
from photo_notes.services.photos import PhotoStore
from photo_notes.services.speech import SpeechNotifier
from photo_notes.services.workspace import WorkspaceService

GREETING = "Hello! Say take a photo, or start note to record a voice note."
NOTE_STARTED = "Note started. I'm listening."
NOTE_SAVED = "Note saved."
NOTE_EMPTY = "Note was empty, nothing saved."
PHOTO_SAVED = "Photo saved."

_logger = logging.getLogger(__name__)


class DeviceSession(Protocol):
    """Camera and speaker of one connected headset."""

    async def request_photo(self) -> PhotoData:
        """Take a photo and return it once the device uploads it."""

    async def play_audio(self, audio_url: str) -> AudioPlaybackResult:
        """Play an audio URL on the headset."""


DeviceFactory = Callable[[str, str], DeviceSession]


@dataclass
class SessionCoordinator:
    """Owns one UserSession per user and reacts to device events."""

    photo_store: PhotoStore
    speech: SpeechNotifier
    workspace: WorkspaceService
    device_factory: DeviceFactory
    activation_words: tuple[str, ...] = ("hey glasses", "hello glasses")
    streaming_interval_seconds: float = 2.0
    streaming_fallback_seconds: float = 30.0
    clock: Callable[[], float] = time.monotonic
    _sessions: dict[str, UserSession] = field(default_factory=dict, init=False)

    def get(self, user_id: str) -> UserSession | None:
        """Return the live session for a user, if any."""
        return self._sessions.get(user_id)

    async def start_session(self, session_id: str, user_id: str) -> UserSession:
        """Create a fresh session record and start its streaming ticker."""
        previous = self._sessions.pop(user_id, None)
        if previous is not None:
            _cancel_ticker(previous)
        session = UserSession(
            session_id=session_id,
            user_id=user_id,
            device=self.device_factory(session_id, user_id),
            next_capture_at=self.clock(),
        )
        session.ticker = asyncio.create_task(self._run_ticker(user_id))
        self._sessions[user_id] = session
        _logger.info("Session started: user_id=%s session_id=%s", user_id, session_id)
        return session

    async def stop_session(self, user_id: str, reason: str) -> None:
        """Reset and forget a user's session."""
        session = self._sessions.pop(user_id, None)
        if session is None:
            _logger.info("Stop for unknown session: user_id=%s", user_id)
            return
        session.reset()
        _cancel_ticker(session)
        _logger.info("Session stopped: user_id=%s reason=%s", user_id, reason)

    async def handle_disconnect(self, user_id: str) -> None:
        """Halt camera and note activity while keeping the record."""
        session = self._sessions.get(user_id)
        if session is None:
            return
        session.reset()
        _logger.info("Device disconnected: user_id=%s", user_id)

    async def handle_button_press(
        self, user_id: str, button_id: str, press_type: str
    ) -> None:
        """Long press toggles streaming; any other press takes a photo."""
        _logger.info("Button pressed: button_id=%s type=%s", button_id, press_type)
        session = self._sessions.get(user_id)
        if session is None:
            return
        if press_type == "long":
            session.streaming = not session.streaming
            _logger.info(
                "Streaming photos: user_id=%s enabled=%s", user_id, session.streaming
            )
            return
        await self.capture(user_id)

    async def capture(self, user_id: str) -> StoredPhoto | None:
        """Take and cache one photo unless a capture is already running."""
        session = self._sessions.get(user_id)
        if session is None:
            return None
        if session.capture_in_flight:
            _logger.info("Capture already in flight, dropping: user_id=%s", user_id)
            return None
        token = _begin_capture(session)
        try:
            photo = await session.device.request_photo()
            return self.photo_store.store(photo, user_id)
        except Exception:
            _logger.exception("Error taking photo: user_id=%s", user_id)
            return None
        finally:
            _end_capture(session, token)

    async def tick(self, user_id: str) -> None:
        """Streaming step: capture when enabled, due and idle."""
        session = self._sessions.get(user_id)
        if session is None or not session.streaming or session.capture_in_flight:
            return
        now = self.clock()
        if session.next_capture_at is not None and now < session.next_capture_at:
            return
        token = _begin_capture(session)
        # pushed forward in case the capture hangs
        session.next_capture_at = now + self.streaming_fallback_seconds
        try:
            photo = await session.device.request_photo()
            self.photo_store.store(photo, user_id)
            session.next_capture_at = self.clock()
        except Exception:
            _logger.exception("Error auto-taking photo: user_id=%s", user_id)
        finally:
            _end_capture(session, token)

    async def _run_ticker(self, user_id: str) -> None:
        while True:
            await asyncio.sleep(self.streaming_interval_seconds)
            await self.tick(user_id)

    async def handle_transcription(
        self, user_id: str, text: str, is_final: bool
    ) -> None:
        """React to a final transcription; interim results are ignored."""
        if not is_final:
            return
        session = self._sessions.get(user_id)
        if session is None:
            return
        command = parse_command(text, self.activation_words, session.note_recording)
        if command.kind is CommandKind.NOTE_TEXT:
            if command.text:
                session.note_buffer = " ".join(
                    part for part in (session.note_buffer, command.text) if part
                )
        elif command.kind is CommandKind.END_NOTE:
            await self._finish_note(session)
        elif command.kind is CommandKind.START_NOTE:
            session.note_buffer = ""
            session.note_recording = True
            _logger.info("Voice note started: user_id=%s", user_id)
            await self.speech.speak(session.device, NOTE_STARTED)
        elif command.kind is CommandKind.GREETING:
            await self.speech.speak(session.device, GREETING)
        elif command.kind is CommandKind.CAPTURE:
            await self.capture_and_persist(user_id, command.text)

    async def _finish_note(self, session: UserSession) -> None:
        note = session.note_buffer.strip()
        session.note_recording = False
        session.note_buffer = ""
        if not note:
            _logger.info("Voice note empty: user_id=%s", session.user_id)
            await self.speech.speak(session.device, NOTE_EMPTY)
            return
        try:
            await self.workspace.persist_note(note)
        except Exception:
            _logger.exception("Failed to save voice note: user_id=%s", session.user_id)
            return
        await self.speech.speak(session.device, NOTE_SAVED)

    async def capture_and_persist(self, user_id: str, title: str | None) -> bool:
        """Capture a photo and save it to the workspace with an optional title."""
        session = self._sessions.get(user_id)
        if session is None:
            return False
        if session.capture_in_flight:
            _logger.info("Capture already in flight, dropping: user_id=%s", user_id)
            return False
        token = _begin_capture(session)
        try:
            photo = await session.device.request_photo()
            self.photo_store.store(photo, user_id)
            await self.workspace.persist_photo(photo, title)
        except Exception:
            _logger.exception("Failed to save photo: user_id=%s", user_id)
            return False
        finally:
            _end_capture(session, token)
        await self.speech.speak(session.device, PHOTO_SAVED)
        return True

    async def close(self) -> None:
        """Stop every live session."""
        for user_id in list(self._sessions):
            await self.stop_session(user_id, "shutdown")


def _cancel_ticker(session: UserSession) -> None:
    if session.ticker is not None:
        session.ticker.cancel()
        session.ticker = None


def _begin_capture(session: UserSession) -> object:
    token = object()
    session.capture_in_flight = True
    session.capture_token = token
    return token


def _end_capture(session: UserSession, token: object) -> None:
    # a reset may have handed the slot to a newer capture
    if session.capture_token is token:
        session.capture_in_flight = False
        session.capture_token = None
