"""Gallery retrieval with signed image URLs."""

from dataclasses import dataclass, replace

from momentarium.domain.albums import GalleryAlbum
from momentarium.services.albums import AlbumRepository
from momentarium.services.storage import StorageClient


@dataclass
class GalleryService:
    """Reads a user's albums and attaches read URLs to their images."""

    album_repository: AlbumRepository
    storage_client: StorageClient
    read_url_expiry_seconds: int = 3600

    def get_gallery(self, user_id: int) -> list[GalleryAlbum]:
        """Return the user's albums with a read URL per image."""
        albums = self.album_repository.list_albums_with_images(user_id)
        return [
            replace(
                album,
                images=[
                    replace(
                        image,
                        url=self.storage_client.create_read_url(
                            image.storage_key, self.read_url_expiry_seconds
                        ),
                    )
                    for image in album.images
                ],
            )
            for album in albums
        ]
