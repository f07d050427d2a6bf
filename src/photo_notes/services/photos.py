"""Latest-photo cache used by the preview endpoints."""

import logging
from dataclasses import dataclass
from typing import Protocol

from photo_notes.domain.photos import PhotoData, StoredPhoto

_logger = logging.getLogger(__name__)


class PhotoStore(Protocol):
    """Store holding the single most recent photo per user."""

    def store(self, photo: PhotoData, user_id: str) -> StoredPhoto:
        """Replace the user's latest photo."""

    def latest(self, user_id: str) -> StoredPhoto | None:
        """Return the user's latest photo, if any."""

    def get(self, user_id: str, request_id: str) -> StoredPhoto | None:
        """Return the latest photo only when its request id matches."""


@dataclass
class InMemoryPhotoStore(PhotoStore):
    """Process-local photo store; entries live until restart."""

    _photos: dict[str, StoredPhoto]

    def __init__(self) -> None:
        self._photos = {}

    def store(self, photo: PhotoData, user_id: str) -> StoredPhoto:
        """Overwrite the previous entry for the user."""
        stored = StoredPhoto.from_photo(photo, user_id)
        self._photos[user_id] = stored
        _logger.info(
            "Photo cached: user_id=%s request_id=%s size=%s",
            user_id,
            stored.request_id,
            stored.size,
        )
        return stored

    def latest(self, user_id: str) -> StoredPhoto | None:
        return self._photos.get(user_id)

    def get(self, user_id: str, request_id: str) -> StoredPhoto | None:
        photo = self._photos.get(user_id)
        if photo is None or photo.request_id != request_id:
            return None
        return photo
