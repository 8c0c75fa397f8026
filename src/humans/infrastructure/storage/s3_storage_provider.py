"""Amazon S3 storage provider.

Buckets of the application map to key prefixes inside one S3 bucket, so
``("avatars", "<user>/avatar-1.png")`` becomes the key
``avatars/<user>/avatar-1.png``.
"""

import asyncio

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict

from humans.domain.exceptions import StorageError
from humans.infrastructure.storage.base import StorageProvider


class S3StorageSettings(BaseModel):
    """Configuration settings for the S3 storage provider."""

    model_config = ConfigDict(from_attributes=True)

    bucket: str
    region: str
    access_key_id: str | None = None
    secret_access_key: str | None = None
    endpoint_url: str | None = None
    public_url: str | None = None


class S3StorageProvider(StorageProvider):
    """Storage provider implementation for Amazon S3."""

    def __init__(self, settings: S3StorageSettings) -> None:
        self.settings = settings
        self._client = None

    def _get_client(self):
        """Get or create the S3 client."""
        if self._client is None:
            client_kwargs = {"region_name": self.settings.region}
            if self.settings.access_key_id and self.settings.secret_access_key:
                client_kwargs["aws_access_key_id"] = self.settings.access_key_id
                client_kwargs["aws_secret_access_key"] = self.settings.secret_access_key
            if self.settings.endpoint_url:
                client_kwargs["endpoint_url"] = self.settings.endpoint_url

            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    @staticmethod
    def _key(bucket: str, path: str) -> str:
        return f"{bucket}/{path.lstrip('/')}"

    @staticmethod
    def _is_missing(error: ClientError) -> bool:
        error_code = error.response.get("Error", {}).get("Code", "Unknown")
        return error_code in {"NoSuchKey", "404", "NotFound"}

    async def _exists(self, key: str) -> bool:
        try:
            await asyncio.to_thread(
                self._get_client().head_object,
                Bucket=self.settings.bucket,
                Key=key,
            )
        except ClientError as e:
            if self._is_missing(e):
                return False
            raise
        return True

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
        key = self._key(bucket, path)
        put_kwargs = {"Bucket": self.settings.bucket, "Key": key, "Body": content}
        if content_type:
            put_kwargs["ContentType"] = content_type
        if cache_control:
            put_kwargs["CacheControl"] = f"max-age={cache_control}"

        try:
            if not upsert and await self._exists(key):
                raise StorageError(f"Object already exists: {bucket}/{path}")
            await asyncio.to_thread(self._get_client().put_object, **put_kwargs)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload file to S3: {str(e)}") from e

        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        key = self._key(bucket, path)
        if self.settings.public_url:
            return f"{self.settings.public_url.rstrip('/')}/{key}"
        if self.settings.endpoint_url:
            return f"{self.settings.endpoint_url.rstrip('/')}/{self.settings.bucket}/{key}"
        return f"https://{self.settings.bucket}.s3.{self.settings.region}.amazonaws.com/{key}"

    async def remove(self, bucket: str, paths: list[str]) -> None:
        for path in paths:
            key = self._key(bucket, path)
            try:
                if not await self._exists(key):
                    raise StorageError(f"Object not found: {bucket}/{path}")
                await asyncio.to_thread(
                    self._get_client().delete_object,
                    Bucket=self.settings.bucket,
                    Key=key,
                )
            except (ClientError, BotoCoreError) as e:
                raise StorageError(f"Failed to delete file from S3: {str(e)}") from e

    async def test_connection(self) -> tuple[bool, str | None]:
        try:
            await asyncio.to_thread(self._get_client().head_bucket, Bucket=self.settings.bucket)
            return True, (
                f"S3 connection successful. Bucket '{self.settings.bucket}' "
                f"is accessible in region '{self.settings.region}'."
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = e.response.get("Error", {}).get("Message", str(e))
            return False, f"S3 connection failed ({error_code}): {error_message}"
        except BotoCoreError as e:
            return False, f"S3 connection failed: {str(e)}"
