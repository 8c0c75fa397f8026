"""Base abstractions for object storage providers.

Objects are addressed by a bucket name and a path inside the bucket,
e.g. ``("avatars", "<user_id>/avatar-1700000000000.png")``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class StoredFile:
    """Transport object returned by providers that serve files themselves."""

    local_path: Path | None = None
    content: bytes | None = None
    filename: str | None = None
    mime_type: str | None = None


class StorageProvider(ABC):
    """Abstract base class for storage providers."""

    @abstractmethod
    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        content_type: str | None = None,
        cache_control: str | None = None,
        upsert: bool = False,
    ) -> str:
        """Store an object and return its path.

        Raises:
            StorageError: If the object exists and upsert is False, or the
                backend rejects the write.
        """
        ...

    @abstractmethod
    def get_public_url(self, bucket: str, path: str) -> str:
        """Return the public URL an object is served from."""
        ...

    @abstractmethod
    async def remove(self, bucket: str, paths: list[str]) -> None:
        """Delete objects.

        Raises:
            StorageError: If any object cannot be deleted.
        """
        ...

    @abstractmethod
    async def test_connection(self) -> tuple[bool, str | None]:
        """Test provider connectivity and credentials."""
        ...
