"""Collection API routes.

Provides endpoints for the caller's collections and the grouped view of
their blocks.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.domain.services import CollectionService
from humans.infrastructure.api.dependencies import AuthenticatedUser
from humans.infrastructure.api.schemas import (
    BlockResponse,
    BlocksByCollectionResponse,
    CollectionCreateRequest,
    CollectionResponse,
    CollectionUpdateRequest,
)
from humans.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[CollectionResponse])
async def list_collections(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> list[CollectionResponse]:
    """List the caller's collections in display order."""
    service = CollectionService(session, current_user.user_id)
    collections = await service.get_user_collections(current_user.user_id)
    return [CollectionResponse.model_validate(collection) for collection in collections]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CollectionResponse,
    responses={400: {"description": "Validation error"}},
)
async def create_collection(
    request: CollectionCreateRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> CollectionResponse:
    collection = await CollectionService(session, current_user.user_id).create_collection(
        current_user.user_id,
        request.name,
        description=request.description,
        is_public=request.is_public,
        display_order=request.display_order,
        slug=request.slug,
    )
    return CollectionResponse.model_validate(collection)


@router.post("/default", status_code=status.HTTP_201_CREATED, response_model=CollectionResponse)
async def create_default_collection(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> CollectionResponse:
    """Create the caller's "Uncategorized" collection."""
    service = CollectionService(session, current_user.user_id)
    collection = await service.create_default_collection(current_user.user_id)
    return CollectionResponse.model_validate(collection)


@router.get("/grouped", response_model=BlocksByCollectionResponse)
async def get_blocks_by_collection(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlocksByCollectionResponse:
    """Return the caller's blocks partitioned by collection."""
    service = CollectionService(session, current_user.user_id)
    grouped = await service.get_blocks_by_collection(current_user.user_id)
    return BlocksByCollectionResponse(
        collections=[CollectionResponse.model_validate(c) for c in grouped.collections],
        blocks_by_collection={
            collection_id: [BlockResponse.model_validate(block) for block in blocks]
            for collection_id, blocks in grouped.blocks_by_collection.items()
        },
        uncategorized_blocks=[
            BlockResponse.model_validate(block) for block in grouped.uncategorized_blocks
        ],
    )


@router.get(
    "/{collection_id}",
    response_model=CollectionResponse,
    responses={404: {"description": "Not found"}},
)
async def get_collection(
    collection_id: str,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> CollectionResponse:
    collection = await CollectionService(session, current_user.user_id).get_collection(
        collection_id
    )
    return CollectionResponse.model_validate(collection)


@router.patch(
    "/{collection_id}",
    response_model=CollectionResponse,
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Not found"},
    },
)
async def update_collection(
    collection_id: str,
    request: CollectionUpdateRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> CollectionResponse:
    changes = request.model_dump(exclude_unset=True)
    collection = await CollectionService(session, current_user.user_id).update_collection(
        collection_id, changes
    )
    return CollectionResponse.model_validate(collection)


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_collection(
    collection_id: str,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> None:
    """Delete the collection; its blocks become uncategorized."""
    await CollectionService(session, current_user.user_id).delete_collection(collection_id)
