"""Supabase-backed image repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from momentarium.domain.images import ImageMetadata, ImageRecord
from momentarium.services.images import ImageRepository

_COLUMNS = (
    "id, user_id, storage_key, original_filename, content_type, "
    "file_size_bytes, width, height, created_at"
)


@dataclass
class SupabaseImageRepository(ImageRepository):
    """Supabase implementation for image metadata persistence."""

    client: Client

    def insert_image(
        self, user_id: int, storage_key: str, metadata: ImageMetadata
    ) -> ImageRecord | None:
        """Insert an image row unless its storage key is already taken."""
        response = (
            self.client.table("images")
            .upsert(
                {
                    "user_id": user_id,
                    "storage_key": storage_key,
                    "original_filename": metadata.original_filename,
                    "content_type": metadata.content_type,
                    "file_size_bytes": metadata.file_size_bytes,
                    "width": metadata.width,
                    "height": metadata.height,
                },
                on_conflict="storage_key",
                ignore_duplicates=True,
            )
            .execute()
        )
        if not response.data:
            return None
        return _to_image(response.data[0])

    def find_by_storage_keys(self, storage_keys: list[str]) -> list[ImageRecord]:
        """Return image rows whose storage key is in ``storage_keys``."""
        response = (
            self.client.table("images")
            .select(_COLUMNS)
            .in_("storage_key", storage_keys)
            .execute()
        )
        return [_to_image(row) for row in response.data or []]


def _to_image(row: dict[str, object]) -> ImageRecord:
    created_at = row.get("created_at")
    return ImageRecord(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        storage_key=str(row["storage_key"]),
        metadata=ImageMetadata(
            original_filename=row.get("original_filename"),
            content_type=row.get("content_type"),
            file_size_bytes=row.get("file_size_bytes"),
            width=row.get("width"),
            height=row.get("height"),
        ),
        created_at=datetime.fromisoformat(str(created_at)) if created_at else None,
    )
