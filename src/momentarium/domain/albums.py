"""Domain models for curated albums and galleries."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AlbumRecord:
    """Represents a persisted album row."""

    id: int
    user_id: int
    title: str
    theme_description: str | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class AlbumImageLink:
    """Link between an album and one image with its position."""

    image_id: int
    display_order: int


@dataclass(frozen=True)
class MaterializedAlbum:
    """An album created from a proposal entry and the images linked to it."""

    album: AlbumRecord
    links: tuple[AlbumImageLink, ...]


@dataclass(frozen=True)
class GalleryImage:
    """Image entry of a gallery album."""

    id: int
    storage_key: str
    original_filename: str | None
    content_type: str | None
    display_order: int
    url: str | None = None


@dataclass(frozen=True)
class GalleryAlbum:
    """Album with its ordered images, as returned by the gallery endpoint."""

    id: int
    user_id: int
    title: str
    theme_description: str | None
    created_at: datetime | None
    images: list[GalleryImage]
