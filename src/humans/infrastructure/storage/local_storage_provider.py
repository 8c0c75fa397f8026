"""Local filesystem storage provider."""

import asyncio
from pathlib import Path

from humans.core.logging import get_logger
from humans.domain.exceptions import StorageError
from humans.infrastructure.storage.base import StorageProvider, StoredFile

logger = get_logger(__name__)


class LocalStorageProvider(StorageProvider):
    """Storage provider keeping objects under ``<storage_path>/<bucket>/<path>``.

    Objects are served by the application at ``/files/<bucket>/<path>``.
    """

    def __init__(self, storage_path: str, public_base_url: str) -> None:
        self.storage_path = Path(storage_path)
        self.public_base_url = public_base_url.rstrip("/")

    def resolve_path(self, bucket: str, path: str) -> Path:
        """Map a bucket path to a file below the storage root.

        Raises:
            StorageError: If the path escapes the bucket directory.
        """
        bucket_root = (self.storage_path / bucket).resolve()
        absolute_path = (bucket_root / path).resolve()
        if not absolute_path.is_relative_to(bucket_root):
            raise StorageError("Invalid file path")
        return absolute_path

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
        file_path = self.resolve_path(bucket, path)
        if file_path.exists() and not upsert:
            raise StorageError(f"Object already exists: {bucket}/{path}")

        def _write() -> None:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(content)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageError(f"Failed to store object: {e}") from e

        logger.debug("Object stored", bucket=bucket, path=path, size=len(content))
        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/files/{bucket}/{path}"

    async def get_file(self, bucket: str, path: str) -> StoredFile:
        """Locate a stored object for serving.

        Raises:
            FileNotFoundError: If no such object exists.
        """
        file_path = self.resolve_path(bucket, path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {bucket}/{path}")
        return StoredFile(local_path=file_path, filename=file_path.name)

    async def remove(self, bucket: str, paths: list[str]) -> None:
        for path in paths:
            file_path = self.resolve_path(bucket, path)
            try:
                await asyncio.to_thread(file_path.unlink)
            except FileNotFoundError as e:
                raise StorageError(f"Object not found: {bucket}/{path}") from e
            except OSError as e:
                raise StorageError(f"Failed to delete object: {e}") from e

    async def test_connection(self) -> tuple[bool, str | None]:
        """Verify that the configured local storage path is writable."""
        try:
            self.storage_path.mkdir(parents=True, exist_ok=True)

            probe_file = self.storage_path / ".storage_provider_probe"
            probe_file.write_text("ok", encoding="utf-8")
            probe_file.unlink(missing_ok=True)

            return True, f"Local storage is writable at '{self.storage_path}'."
        except Exception as e:
            return False, f"Local storage test failed: {str(e)}"
