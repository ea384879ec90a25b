"""Idempotent image registration."""

from dataclasses import dataclass
from typing import Protocol

from momentarium.domain.images import ImageMetadata, ImageRecord


class ImageRepository(Protocol):
    """Persistence interface for image metadata."""

    def insert_image(
        self, user_id: int, storage_key: str, metadata: ImageMetadata
    ) -> ImageRecord | None:
        """Insert an image row, returning None if the storage key already exists."""

    def find_by_storage_keys(self, storage_keys: list[str]) -> list[ImageRecord]:
        """Return image rows for the given storage keys."""


@dataclass
class ImageRegistry:
    """Registers images once per storage key and resolves them later."""

    repository: ImageRepository

    def ensure(
        self,
        user_id: int,
        storage_key: str,
        metadata: ImageMetadata | None = None,
    ) -> ImageRecord:
        """Return the image for ``storage_key``, creating it if absent.

        An existing row is returned untouched, even if it belongs to a
        different upload or carries different metadata.
        """
        created = self.repository.insert_image(
            user_id, storage_key, metadata or ImageMetadata()
        )
        if created is not None:
            return created
        existing = self.repository.find_by_storage_keys([storage_key])
        if not existing:
            raise RuntimeError(f"Image {storage_key!r} vanished after insert conflict")
        return existing[0]

    def resolve(self, storage_keys: list[str] | tuple[str, ...]) -> list[ImageRecord]:
        """Return registered images in key order, skipping unknown keys."""
        if not storage_keys:
            return []
        by_key = {
            image.storage_key: image
            for image in self.repository.find_by_storage_keys(list(storage_keys))
        }
        resolved: list[ImageRecord] = []
        seen: set[str] = set()
        for key in storage_keys:
            image = by_key.get(key)
            if image is not None and key not in seen:
                resolved.append(image)
                seen.add(key)
        return resolved
