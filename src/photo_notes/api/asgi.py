"""ASGI entrypoint for the photo notes API."""

from photo_notes.api.app import create_app
from photo_notes.containers import build_container

app = create_app(build_container())
