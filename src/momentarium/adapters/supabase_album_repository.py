"""Supabase-backed album repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from momentarium.domain.albums import (
    AlbumImageLink,
    AlbumRecord,
    GalleryAlbum,
    GalleryImage,
)
from momentarium.services.albums import AlbumRepository

_GALLERY_COLUMNS = (
    "id, user_id, title, theme_description, created_at, "
    "album_images(display_order, images(id, storage_key, original_filename, "
    "content_type))"
)


@dataclass
class SupabaseAlbumRepository(AlbumRepository):
    """Supabase implementation for albums and album image links."""

    client: Client

    def create_album(
        self, user_id: int, title: str, theme_description: str | None
    ) -> AlbumRecord:
        """Create an album row and return it."""
        response = (
            self.client.table("albums")
            .insert(
                {
                    "user_id": user_id,
                    "title": title,
                    "theme_description": theme_description,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create album")
        row = response.data[0]
        return AlbumRecord(
            id=int(row["id"]),
            user_id=int(row["user_id"]),
            title=row["title"],
            theme_description=row.get("theme_description"),
            created_at=_parse_timestamp(row.get("created_at")),
        )

    def add_images(self, album_id: int, links: list[AlbumImageLink]) -> None:
        """Insert album image links, skipping existing pairs."""
        if not links:
            return
        self.client.table("album_images").upsert(
            [
                {
                    "album_id": album_id,
                    "image_id": link.image_id,
                    "display_order": link.display_order,
                }
                for link in links
            ],
            on_conflict="album_id,image_id",
            ignore_duplicates=True,
        ).execute()

    def delete_albums(self, album_ids: list[int]) -> None:
        """Delete albums; links go with them through the cascade."""
        if not album_ids:
            return
        self.client.table("albums").delete().in_("id", album_ids).execute()

    def list_albums_with_images(self, user_id: int) -> list[GalleryAlbum]:
        """Return the user's albums with their images."""
        response = (
            self.client.table("albums")
            .select(_GALLERY_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_gallery_album(row) for row in response.data or []]


def _to_gallery_album(row: dict[str, object]) -> GalleryAlbum:
    images: list[GalleryImage] = []
    for link in row.get("album_images") or []:
        image = link.get("images")
        if not image:
            continue
        images.append(
            GalleryImage(
                id=int(image["id"]),
                storage_key=image["storage_key"],
                original_filename=image.get("original_filename"),
                content_type=image.get("content_type"),
                display_order=int(link.get("display_order") or 0),
            )
        )
    images.sort(key=lambda image: image.display_order)
    return GalleryAlbum(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        title=row["title"],
        theme_description=row.get("theme_description"),
        created_at=_parse_timestamp(row.get("created_at")),
        images=images,
    )


def _parse_timestamp(value: object) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))
