"""Object storage providers (local filesystem and S3)."""

from humans.infrastructure.storage.base import StorageProvider, StoredFile
from humans.infrastructure.storage.local_storage_provider import LocalStorageProvider
from humans.infrastructure.storage.s3_storage_provider import (
    S3StorageProvider,
    S3StorageSettings,
)
from humans.infrastructure.storage.storage_service import (
    build_storage_provider,
    get_storage_provider,
)

__all__ = [
    "LocalStorageProvider",
    "S3StorageProvider",
    "S3StorageSettings",
    "StorageProvider",
    "StoredFile",
    "build_storage_provider",
    "get_storage_provider",
]
