"""Persist voice notes and photos to the document workspace."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from photo_notes.domain.photos import PhotoData
from photo_notes.services.commands import format_title

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileUpload:
    """An upload slot handed out by the workspace."""

    id: str
    upload_url: str


class WorkspaceClient(Protocol):
    """Interface for the workspace block and upload APIs."""

    async def append_blocks(
        self, page_id: str, children: list[dict[str, object]]
    ) -> None:
        """Append blocks to the end of a page."""

    async def create_file_upload(self) -> FileUpload:
        """Request a new upload slot."""

    async def send_file_upload(
        self, upload_url: str, filename: str, content: bytes, mime_type: str
    ) -> None:
        """Upload file contents to a slot."""


def paragraph_block(text: str) -> dict[str, object]:
    """Build a single-paragraph block."""
    return {
        "object": "block",
        "type": "paragraph",
        "paragraph": {"rich_text": [{"type": "text", "text": {"content": text}}]},
    }


def image_block(file_upload_id: str) -> dict[str, object]:
    """Build an image block that references an uploaded file."""
    return {
        "object": "block",
        "type": "image",
        "image": {"type": "file_upload", "file_upload": {"id": file_upload_id}},
    }


@dataclass
class WorkspaceService:
    """Formats notes and photos and appends them to a fixed page."""

    client: WorkspaceClient
    page_id: str
    clock: Callable[[], datetime] = datetime.now

    async def persist_note(self, text: str) -> None:
        """Append a timestamped voice note paragraph."""
        if not text:
            raise ValueError("Note text must be a non-empty string")
        content = f"Voice note ({self._timestamp()})\n{text}"
        await self.client.append_blocks(self.page_id, [paragraph_block(content)])
        _logger.info("Voice note saved: chars=%s", len(text))

    async def persist_photo(self, photo: PhotoData, title: str | None = None) -> None:
        """Upload a photo and append it, with optional title, to the page."""
        if not photo.buffer:
            raise ValueError("Invalid photo data provided")
        upload = await self.client.create_file_upload()
        filename = photo.filename or f"photo_{int(self.clock().timestamp() * 1000)}"
        await self.client.send_file_upload(
            upload.upload_url, filename, photo.buffer, photo.mime_type
        )
        if title:
            await self.client.append_blocks(
                self.page_id, [paragraph_block(format_title(title))]
            )
        await self.client.append_blocks(self.page_id, [image_block(upload.id)])
        await self.client.append_blocks(
            self.page_id,
            [paragraph_block(f"Photo captured at: {self._timestamp()}")],
        )
        _logger.info("Photo saved to workspace: request_id=%s", photo.request_id)

    def _timestamp(self) -> str:
        return self.clock().strftime("%Y-%m-%d %H:%M:%S")
