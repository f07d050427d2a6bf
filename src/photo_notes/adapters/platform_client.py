"""Headset platform client for camera and audio requests."""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

import httpx

from photo_notes.domain.audio import AudioPlaybackResult
from photo_notes.domain.photos import PhotoData
from photo_notes.services.sessions import DeviceSession


class PlatformClient(Protocol):
    """Interface for session-scoped device commands."""

    async def request_photo(self, session_id: str) -> PhotoData:
        """Ask the headset camera for a photo."""

    async def play_audio(self, session_id: str, audio_url: str) -> AudioPlaybackResult:
        """Ask the headset to play an audio URL."""


@dataclass
class HttpxPlatformClient(PlatformClient):
    """Platform client implemented with httpx."""

    api_url: str
    api_key: str
    package_name: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, api_url: str, api_key: str, package_name: str
    ) -> "HttpxPlatformClient":
        """Create a platform client with a managed httpx session."""
        return cls(
            api_url=api_url.rstrip("/"),
            api_key=api_key,
            package_name=package_name,
            http_client=httpx.AsyncClient(),
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "X-Package-Name": self.package_name,
        }

    async def request_photo(self, session_id: str) -> PhotoData:
        """Request a photo; the response body carries the image."""
        url = f"{self.api_url}/api/sessions/{session_id}/photo"
        response = await self.http_client.post(url, headers=self._headers(), timeout=60)
        response.raise_for_status()
        content = response.content
        if not content:
            raise RuntimeError("Platform returned an empty photo")
        request_id = response.headers.get("x-request-id") or uuid.uuid4().hex
        mime_type = response.headers.get("content-type", "image/jpeg").split(";")[0]
        filename = response.headers.get("x-filename") or f"photo_{request_id}.jpg"
        return PhotoData(
            request_id=request_id,
            buffer=content,
            timestamp=datetime.now(tz=UTC),
            mime_type=mime_type,
            filename=filename,
            size=len(content),
        )

    async def play_audio(self, session_id: str, audio_url: str) -> AudioPlaybackResult:
        """Request audio playback and return the reported outcome."""
        url = f"{self.api_url}/api/sessions/{session_id}/audio"
        response = await self.http_client.post(
            url, headers=self._headers(), json={"audioUrl": audio_url}, timeout=30
        )
        response.raise_for_status()
        payload = response.json()
        return AudioPlaybackResult(
            success=bool(payload.get("success")),
            error=payload.get("error"),
            duration_ms=payload.get("duration"),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


@dataclass
class PlatformDeviceSession(DeviceSession):
    """Device handle bound to one platform session."""

    session_id: str
    user_id: str
    client: PlatformClient

    async def request_photo(self) -> PhotoData:
        return await self.client.request_photo(self.session_id)

    async def play_audio(self, audio_url: str) -> AudioPlaybackResult:
        return await self.client.play_audio(self.session_id, audio_url)
