"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from photo_notes.adapters.elevenlabs_client import HttpxElevenLabsClient
from photo_notes.adapters.notion_client import HttpxNotionClient
from photo_notes.adapters.platform_client import (
    HttpxPlatformClient,
    PlatformClient,
    PlatformDeviceSession,
)
from photo_notes.config import Settings, parse_phrase_list
from photo_notes.services.photos import InMemoryPhotoStore, PhotoStore
from photo_notes.services.sessions import DeviceSession, SessionCoordinator
from photo_notes.services.speech import SpeechNotifier
from photo_notes.services.workspace import WorkspaceService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    platform_client: PlatformClient
    photo_store: PhotoStore
    speech_notifier: SpeechNotifier
    workspace_service: WorkspaceService
    session_coordinator: SessionCoordinator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    platform_client = HttpxPlatformClient.create(
        api_url=resolved_settings.platform_api_url,
        api_key=resolved_settings.platform_api_key,
        package_name=resolved_settings.package_name,
    )
    speech_client = HttpxElevenLabsClient.create(resolved_settings.elevenlabs_api_key)
    notion_client = HttpxNotionClient.create(resolved_settings.notion_api_secret)
    photo_store = InMemoryPhotoStore()
    speech_notifier = SpeechNotifier(
        synthesizer=speech_client,
        audio_dir=Path(resolved_settings.audio_dir),
        base_url=resolved_settings.public_base_url,
    )
    workspace_service = WorkspaceService(
        client=notion_client,
        page_id=resolved_settings.notion_page_id,
    )

    def device_factory(session_id: str, user_id: str) -> DeviceSession:
        return PlatformDeviceSession(
            session_id=session_id, user_id=user_id, client=platform_client
        )

    session_coordinator = SessionCoordinator(
        photo_store=photo_store,
        speech=speech_notifier,
        workspace=workspace_service,
        device_factory=device_factory,
        activation_words=parse_phrase_list(resolved_settings.activation_words),
        streaming_interval_seconds=resolved_settings.streaming_interval_seconds,
        streaming_fallback_seconds=resolved_settings.streaming_fallback_seconds,
    )

    async def close_resources() -> None:
        await session_coordinator.close()
        speech_notifier.close()
        await platform_client.close()
        await speech_client.close()
        await notion_client.close()

    return AppContainer(
        settings=resolved_settings,
        platform_client=platform_client,
        photo_store=photo_store,
        speech_notifier=speech_notifier,
        workspace_service=workspace_service,
        session_coordinator=session_coordinator,
        close_resources=close_resources,
    )
