"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import pytest

from photo_notes.config import Settings
from photo_notes.containers import AppContainer
from photo_notes.domain.audio import AudioPlaybackResult
from photo_notes.domain.photos import PhotoData
from photo_notes.services.photos import InMemoryPhotoStore
from photo_notes.services.sessions import DeviceSession, SessionCoordinator
from photo_notes.services.speech import SpeechNotifier, SpeechSynthesizer
from photo_notes.services.workspace import (
    FileUpload,
    WorkspaceClient,
    WorkspaceService,
)


def make_photo(request_id: str = "req-1", content: bytes = b"jpeg-bytes") -> PhotoData:
    return PhotoData(
        request_id=request_id,
        buffer=content,
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
        mime_type="image/jpeg",
        filename=f"{request_id}.jpg",
        size=len(content),
    )


@dataclass
class FakeDeviceSession(DeviceSession):
    """Fake headset that returns numbered photos and records playback."""

    gate: asyncio.Event | None = None
    gates: list[asyncio.Event] = field(default_factory=list)
    fail_capture: bool = False
    playback_success: bool = True
    photo_requests: int = 0
    played: list[str] = field(default_factory=list)

    async def request_photo(self) -> PhotoData:
        self.photo_requests += 1
        request_id = f"req-{self.photo_requests}"
        if self.gate is not None:
            await self.gate.wait()
        if self.photo_requests <= len(self.gates):
            await self.gates[self.photo_requests - 1].wait()
        if self.fail_capture:
            raise RuntimeError("camera unavailable")
        return make_photo(request_id)

    async def play_audio(self, audio_url: str) -> AudioPlaybackResult:
        self.played.append(audio_url)
        if self.playback_success:
            return AudioPlaybackResult(success=True, duration_ms=1200)
        return AudioPlaybackResult(success=False, error="speaker busy")


@dataclass
class FakeSynthesizer(SpeechSynthesizer):
    """Fake text-to-speech returning fixed bytes."""

    audio: bytes = b"ID3-fake-mp3"
    fail: bool = False
    texts: list[str] = field(default_factory=list)

    async def synthesize(
        self,
        *,
        text: str,
        voice_id: str,
        model_id: str,
        output_format: str,
        voice_settings: dict[str, object],
    ) -> bytes:
        self.texts.append(text)
        if self.fail:
            raise RuntimeError("quota exceeded")
        return self.audio


@dataclass
class InMemoryWorkspaceClient(WorkspaceClient):
    """Workspace client recording every call."""

    blocks: list[dict[str, object]] = field(default_factory=list)
    uploads: list[tuple[str, str, bytes, str]] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    fail_on: str | None = None

    async def append_blocks(
        self, page_id: str, children: list[dict[str, object]]
    ) -> None:
        self._record("append_blocks")
        self.blocks.extend(children)

    async def create_file_upload(self) -> FileUpload:
        self._record("create_file_upload")
        return FileUpload(id="upload-1", upload_url="https://upload.test/upload-1")

    async def send_file_upload(
        self, upload_url: str, filename: str, content: bytes, mime_type: str
    ) -> None:
        self._record("send_file_upload")
        self.uploads.append((upload_url, filename, content, mime_type))

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"{name} failed")

    def texts(self) -> list[str]:
        texts = []
        for block in self.blocks:
            if block["type"] == "paragraph":
                texts.append(block["paragraph"]["rich_text"][0]["text"]["content"])
        return texts


@dataclass
class FakeClock:
    """Manually advanced monotonic clock."""

    now: float = 1000.0

    def __call__(self) -> float:
        return self.now


@dataclass
class CoordinatorHarness:
    """A coordinator plus the fakes it is wired to."""

    coordinator: SessionCoordinator
    device: FakeDeviceSession
    synthesizer: FakeSynthesizer
    workspace_client: InMemoryWorkspaceClient
    photo_store: InMemoryPhotoStore
    clock: FakeClock


def make_harness(audio_dir: Path, device: FakeDeviceSession | None = None):
    device = device or FakeDeviceSession()
    synthesizer = FakeSynthesizer()
    workspace_client = InMemoryWorkspaceClient()
    photo_store = InMemoryPhotoStore()
    clock = FakeClock()
    coordinator = SessionCoordinator(
        photo_store=photo_store,
        speech=SpeechNotifier(
            synthesizer=synthesizer, audio_dir=audio_dir, base_url="http://test"
        ),
        workspace=WorkspaceService(client=workspace_client, page_id="page-1"),
        device_factory=lambda session_id, user_id: device,
        activation_words=("hey glasses",),
        streaming_interval_seconds=3600,
        streaming_fallback_seconds=30,
        clock=clock,
    )
    return CoordinatorHarness(
        coordinator=coordinator,
        device=device,
        synthesizer=synthesizer,
        workspace_client=workspace_client,
        photo_store=photo_store,
        clock=clock,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        package_name="com.example.photonotes",
        platform_api_key="platform-key",
        elevenlabs_api_key="eleven-key",
        notion_api_secret="notion-secret",
        notion_page_id="page-1",
        audio_dir=str(tmp_path / "audio"),
    )


@pytest.fixture
def device() -> FakeDeviceSession:
    return FakeDeviceSession()


@pytest.fixture
def harness(tmp_path: Path, device: FakeDeviceSession) -> CoordinatorHarness:
    return make_harness(tmp_path / "audio", device)


@pytest.fixture
def container(settings: Settings, harness: CoordinatorHarness) -> AppContainer:
    async def close_resources() -> None:
        await harness.coordinator.close()

    return AppContainer(
        settings=settings,
        platform_client=None,  # type: ignore[arg-type]
        photo_store=harness.photo_store,
        speech_notifier=harness.coordinator.speech,
        workspace_service=harness.coordinator.workspace,
        session_coordinator=harness.coordinator,
        close_resources=close_resources,
    )
