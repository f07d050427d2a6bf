"""ElevenLabs text-to-speech client."""

from dataclasses import dataclass

import httpx

from photo_notes.services.speech import SpeechSynthesizer


@dataclass
class HttpxElevenLabsClient(SpeechSynthesizer):
    """Speech synthesizer backed by the ElevenLabs REST API."""

    api_key: str
    http_client: httpx.AsyncClient
    base_url: str = "https://api.elevenlabs.io/v1"

    @classmethod
    def create(cls, api_key: str) -> "HttpxElevenLabsClient":
        """Create a client with a managed httpx session."""
        return cls(api_key=api_key, http_client=httpx.AsyncClient())

    async def synthesize(
        self,
        *,
        text: str,
        voice_id: str,
        model_id: str,
        output_format: str,
        voice_settings: dict[str, object],
    ) -> bytes:
        """Convert text to audio bytes."""
        url = f"{self.base_url}/text-to-speech/{voice_id}"
        response = await self.http_client.post(
            url,
            params={"output_format": output_format},
            headers={"xi-api-key": self.api_key, "Accept": "audio/mpeg"},
            json={
                "text": text,
                "model_id": model_id,
                "voice_settings": voice_settings,
            },
            timeout=30,
        )
        response.raise_for_status()
        if not response.content:
            raise RuntimeError("ElevenLabs returned empty audio")
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
