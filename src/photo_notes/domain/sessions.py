"""Per-user session state."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from photo_notes.services.sessions import DeviceSession


@dataclass
class UserSession:
    """Mutable state owned by one connected headset session."""

    session_id: str
    user_id: str
    device: DeviceSession
    streaming: bool = False
    next_capture_at: float | None = None
    capture_in_flight: bool = False
    capture_token: object | None = None
    note_recording: bool = False
    note_buffer: str = ""
    ticker: asyncio.Task[None] | None = None

    def reset(self) -> None:
        """Halt camera and note activity for this session."""
        self.streaming = False
        self.note_recording = False
        self.capture_in_flight = False
        self.capture_token = None
        self.note_buffer = ""
        self.next_capture_at = None
