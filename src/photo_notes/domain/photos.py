"""Photo models shared by the camera, cache and workspace layers."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PhotoData:
    """A photo returned by the device camera."""

    request_id: str
    buffer: bytes
    timestamp: datetime
    mime_type: str
    filename: str
    size: int


@dataclass(frozen=True)
class StoredPhoto:
    """The most recent photo cached for a user."""

    request_id: str
    buffer: bytes
    timestamp: datetime
    user_id: str
    mime_type: str
    filename: str
    size: int

    @classmethod
    def from_photo(cls, photo: PhotoData, user_id: str) -> "StoredPhoto":
        """Attach ownership to a captured photo."""
        return cls(
            request_id=photo.request_id,
            buffer=photo.buffer,
            timestamp=photo.timestamp,
            user_id=user_id,
            mime_type=photo.mime_type,
            filename=photo.filename,
            size=photo.size,
        )

    @property
    def timestamp_ms(self) -> int:
        """Capture time as epoch milliseconds."""
        return int(self.timestamp.timestamp() * 1000)
