"""Materialization of album proposals into album rows."""

import logging
from dataclasses import dataclass
from typing import Protocol

from momentarium.domain.albums import (
    AlbumImageLink,
    AlbumRecord,
    GalleryAlbum,
    MaterializedAlbum,
)
from momentarium.domain.curation import AlbumProposal, GeneratedAlbum
from momentarium.domain.images import ImageRecord

logger = logging.getLogger(__name__)


class AlbumRepository(Protocol):
    """Persistence interface for albums and their image links."""

    def create_album(
        self, user_id: int, title: str, theme_description: str | None
    ) -> AlbumRecord:
        """Create an album row and return it."""

    def add_images(self, album_id: int, links: list[AlbumImageLink]) -> None:
        """Link images to an album, ignoring pairs that already exist."""

    def delete_albums(self, album_ids: list[int]) -> None:
        """Delete albums together with their image links."""

    def list_albums_with_images(self, user_id: int) -> list[GalleryAlbum]:
        """Return a user's albums, newest first, with images in display order."""


@dataclass
class AlbumMaterializer:
    """Turns a proposal into albums and image links as one unit of work."""

    repository: AlbumRepository

    def materialize(
        self,
        user_id: int,
        proposal: AlbumProposal,
        images: list[ImageRecord],
    ) -> list[MaterializedAlbum]:
        """Create one album per proposal entry and link its known images.

        Keys without a registered image are skipped. If any write fails, the
        albums created so far are deleted before the error propagates.
        """
        by_key = {image.storage_key: image for image in images}
        created: list[MaterializedAlbum] = []
        try:
            for entry in proposal.albums:
                album = self.repository.create_album(user_id, entry.title, entry.theme)
                links = _links_for(entry, by_key)
                materialized = MaterializedAlbum(album=album, links=tuple(links))
                created.append(materialized)
                if links:
                    self.repository.add_images(album.id, links)
                logger.info(
                    "Created album %r with %d images", album.title, len(links)
                )
        except Exception:
            self.discard(created)
            raise
        return created

    def discard(self, albums: list[MaterializedAlbum]) -> None:
        """Delete previously materialized albums."""
        if not albums:
            return
        album_ids = [materialized.album.id for materialized in albums]
        logger.warning("Rolling back %d album(s): %s", len(album_ids), album_ids)
        self.repository.delete_albums(album_ids)


def _links_for(
    entry: GeneratedAlbum, by_key: dict[str, ImageRecord]
) -> list[AlbumImageLink]:
    """Links ordered by the key's position in the entry's key list."""
    links: list[AlbumImageLink] = []
    linked: set[int] = set()
    for position, key in enumerate(entry.image_keys):
        image = by_key.get(key)
        if image is None or image.id in linked:
            continue
        links.append(AlbumImageLink(image_id=image.id, display_order=position))
        linked.add(image.id)
    return links
