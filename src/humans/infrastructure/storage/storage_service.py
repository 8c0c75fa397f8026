"""Resolution of the configured storage provider."""

from functools import lru_cache

from humans.core.config import Settings, get_settings
from humans.core.logging import get_logger
from humans.infrastructure.storage.base import StorageProvider
from humans.infrastructure.storage.local_storage_provider import LocalStorageProvider
from humans.infrastructure.storage.s3_storage_provider import S3StorageProvider, S3StorageSettings

logger = get_logger(__name__)


def build_storage_provider(settings: Settings) -> StorageProvider:
    """Create the provider selected by ``storage_provider``.

    Raises:
        ValueError: If the provider name is not supported.
    """
    if settings.storage_provider == "local":
        return LocalStorageProvider(
            storage_path=settings.storage_path,
            public_base_url=settings.external_url,
        )

    if settings.storage_provider == "s3":
        s3_settings = S3StorageSettings(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
            public_url=settings.s3_public_url,
        )
        return S3StorageProvider(settings=s3_settings)

    raise ValueError(f"Unsupported storage provider: {settings.storage_provider}")


@lru_cache
def get_storage_provider() -> StorageProvider:
    """Get the process-wide storage provider (FastAPI dependency)."""
    settings = get_settings()
    provider = build_storage_provider(settings)
    logger.info("Storage provider configured", provider=settings.storage_provider)
    return provider
