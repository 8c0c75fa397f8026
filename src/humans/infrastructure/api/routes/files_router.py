"""Serving of objects kept by the local storage provider."""

from fastapi import APIRouter, status
from fastapi.responses import FileResponse

from humans.core.logging import get_logger
from humans.domain.exceptions import NotFoundError, StorageError
from humans.infrastructure.api.dependencies import Storage
from humans.infrastructure.storage import LocalStorageProvider

logger = get_logger(__name__)

router = APIRouter(tags=["files"])


@router.get(
    "/{bucket}/{file_path:path}",
    response_class=FileResponse,
    response_model=None,
    responses={status.HTTP_404_NOT_FOUND: {"description": "No such file"}},
)
async def download_file(bucket: str, file_path: str, storage: Storage) -> FileResponse:
    """Download a stored object. Objects in the store are public."""
    if not isinstance(storage, LocalStorageProvider):
        raise NotFoundError("File not found")

    try:
        stored = await storage.get_file(bucket, file_path)
    except (FileNotFoundError, StorageError) as e:
        logger.info("File download failed", bucket=bucket, file_path=file_path, error=str(e))
        raise NotFoundError("File not found") from e

    return FileResponse(path=stored.local_path)
