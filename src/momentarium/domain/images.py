"""Domain models for uploaded images."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ImageMetadata:
    """Optional metadata captured when an image is registered."""

    original_filename: str | None = None
    content_type: str | None = None
    file_size_bytes: int | None = None
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class ImageRecord:
    """Represents an image row keyed by its storage key."""

    id: int
    user_id: int
    storage_key: str
    metadata: ImageMetadata
    created_at: datetime | None = None


@dataclass(frozen=True)
class ImageSource:
    """An image paired with a temporary read URL."""

    storage_key: str
    url: str
