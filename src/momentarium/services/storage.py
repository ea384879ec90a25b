"""Object storage access."""

from typing import Protocol


class StorageAccessError(RuntimeError):
    """Raised when storage cannot grant access to an object."""


class StorageClient(Protocol):
    """Interface for object storage read access."""

    def create_read_url(self, storage_key: str, expires_in: int) -> str:
        """Return a time-limited URL for reading the object."""
