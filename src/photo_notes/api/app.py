"""FastAPI application factory."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from photo_notes.api.platform_models import DeviceEvent, WebhookRequest
from photo_notes.api.webview import router as webview_router
from photo_notes.app_logging import configure_logging
from photo_notes.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        settings = state_container.settings
        cleanup_task = asyncio.create_task(
            state_container.speech_notifier.run_cleanup_loop(
                settings.audio_cleanup_interval_seconds,
                settings.audio_max_age_minutes,
            )
        )
        logger.info("Photo notes app started: package=%s", settings.package_name)
        yield
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(webview_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/webhook", response_model=None)
    async def webhook(
        payload: WebhookRequest, request: Request
    ) -> dict[str, str] | JSONResponse:
        """Handle session lifecycle requests from the platform."""
        state_container: AppContainer = request.app.state.container
        coordinator = state_container.session_coordinator
        if payload.type == "session_request":
            await coordinator.start_session(payload.session_id, payload.user_id)
            return {"status": "success"}
        if payload.type == "stop_request":
            await coordinator.stop_session(
                payload.user_id, payload.reason or "unspecified"
            )
            return {"status": "success"}
        logger.warning("Unknown webhook type: %s", payload.type)
        return JSONResponse(
            {"error": f"Unknown webhook type: {payload.type}"}, status_code=400
        )

    @app.post("/events", response_model=None)
    async def device_event(
        event: DeviceEvent, request: Request
    ) -> dict[str, str] | JSONResponse:
        """Dispatch a device event to the user's session."""
        state_container: AppContainer = request.app.state.container
        coordinator = state_container.session_coordinator
        if coordinator.get(event.user_id) is None:
            return JSONResponse({"error": "No active session"}, status_code=404)
        if event.type == "button_press":
            await coordinator.handle_button_press(
                event.user_id, event.button_id or "main", event.press_type or "short"
            )
        elif event.type == "transcription":
            await coordinator.handle_transcription(
                event.user_id, event.text or "", event.is_final
            )
        else:
            await coordinator.handle_disconnect(event.user_id)
        return {"status": "ok"}

    return app
