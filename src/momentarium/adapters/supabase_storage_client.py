"""Supabase Storage adapter for signed read URLs."""

from dataclasses import dataclass

from supabase import Client

from momentarium.services.storage import StorageAccessError, StorageClient


@dataclass
class SupabaseStorageClient(StorageClient):
    """Creates signed URLs for objects in a Supabase Storage bucket."""

    client: Client
    bucket: str

    def create_read_url(self, storage_key: str, expires_in: int) -> str:
        """Return a signed URL valid for ``expires_in`` seconds."""
        try:
            result = self.client.storage.from_(self.bucket).create_signed_url(
                storage_key, expires_in
            )
        except Exception as exc:
            raise StorageAccessError(
                f"Could not sign read URL for {storage_key!r}: {exc}"
            ) from exc
        url = result.get("signedURL") or result.get("signedUrl")
        if not url:
            raise StorageAccessError(f"Storage returned no URL for {storage_key!r}")
        return str(url)
