"""Photo preview page and the endpoints it polls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response

from photo_notes.api.auth import TOKEN_COOKIE, TOKEN_QUERY_PARAM, current_user_id

if TYPE_CHECKING:
    from photo_notes.containers import AppContainer

router = APIRouter(tags=["webview"])
_logger = logging.getLogger(__name__)

_NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/webview", response_class=HTMLResponse)
async def webview(
    request: Request, user_id: str | None = Depends(current_user_id)
) -> HTMLResponse:
    """Serve the live photo viewer."""
    if not user_id:
        return HTMLResponse(_NOT_AUTHENTICATED_HTML, status_code=401)
    response = HTMLResponse(_PHOTO_VIEWER_HTML)
    token = request.query_params.get(TOKEN_QUERY_PARAM)
    if token:
        container: AppContainer = request.app.state.container
        response.set_cookie(
            TOKEN_COOKIE,
            token,
            httponly=True,
            samesite="lax",
            secure=container.settings.public_base_url.startswith("https://"),
        )
    return response


@router.get("/api/latest-photo", response_model=None)
async def latest_photo(
    request: Request, user_id: str | None = Depends(current_user_id)
) -> dict[str, object] | JSONResponse:
    """Return metadata about the user's latest photo."""
    if not user_id:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)
    container: AppContainer = request.app.state.container
    photo = container.photo_store.latest(user_id)
    if photo is None:
        return JSONResponse({"error": "No photo available"}, status_code=404)
    return {
        "requestId": photo.request_id,
        "timestamp": photo.timestamp_ms,
        "hasPhoto": True,
    }


@router.get("/api/photo/{request_id}")
async def photo_data(
    request_id: str, request: Request, user_id: str | None = Depends(current_user_id)
) -> Response:
    """Return the raw bytes of the latest photo when the id matches."""
    if not user_id:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)
    container: AppContainer = request.app.state.container
    photo = container.photo_store.get(user_id, request_id)
    if photo is None:
        return JSONResponse({"error": "Photo not found"}, status_code=404)
    return Response(
        content=photo.buffer,
        media_type=photo.mime_type,
        headers={"Cache-Control": "no-cache"},
    )


@router.get("/api/audio/{audio_id}")
async def audio_file(audio_id: str, request: Request) -> Response:
    """Stream a generated speech clip."""
    container: AppContainer = request.app.state.container
    try:
        path = container.speech_notifier.audio_path(audio_id)
        if path is None:
            return JSONResponse({"error": "Audio not found"}, status_code=404)
        path.stat()
    except FileNotFoundError:
        return JSONResponse({"error": "Audio not found"}, status_code=404)
    except OSError:
        _logger.exception("Failed to serve audio", extra={"audio_id": audio_id})
        return JSONResponse({"error": "Failed to serve audio"}, status_code=500)
    return FileResponse(
        path,
        media_type="audio/mpeg",
        headers=_NO_CACHE_HEADERS,
    )


_NOT_AUTHENTICATED_HTML = """<!doctype html>
<html>
  <head><title>Photo Viewer - Not Authenticated</title></head>
  <body style="font-family: Arial, sans-serif; text-align: center; padding: 50px;">
    <h1>Please open this page from the headset companion app</h1>
  </body>
</html>
"""

_PHOTO_VIEWER_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Photo Viewer</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0;
             background: #111; color: #eee; text-align: center; }
      #status { padding: 1rem; opacity: 0.7; }
      #photo { max-width: 100%; max-height: 90vh; display: none; margin: 0 auto; }
    </style>
  </head>
  <body>
    <div id="status">Waiting for a photo...</div>
    <img id="photo" alt="Latest photo" />
    <script>
      let currentId = null;
      async function poll() {
        try {
          const res = await fetch("/api/latest-photo", { credentials: "include" });
          if (res.status === 404) {
            document.getElementById("status").textContent = "No photo yet. Press the button to take one.";
            return;
          }
          if (!res.ok) {
            document.getElementById("status").textContent = "Not authenticated.";
            return;
          }
          const data = await res.json();
          if (data.requestId !== currentId) {
            currentId = data.requestId;
            const img = document.getElementById("photo");
            img.src = "/api/photo/" + encodeURIComponent(currentId) + "?t=" + data.timestamp;
            img.style.display = "block";
            document.getElementById("status").textContent =
              "Taken " + new Date(data.timestamp).toLocaleTimeString();
          }
        } catch (err) {
          document.getElementById("status").textContent = "Connection lost, retrying...";
        }
      }
      poll();
      setInterval(poll, 1000);
    </script>
  </body>
</html>
"""
