"""Block API routes.

Provides endpoints for the caller's blocks: listing, creation, partial
updates, publication and the two batch operations (dashboard order and
public layout). Static paths are declared before ``/{block_id}``.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.domain.entities import BlockLayoutUpdate, BlockPositionUpdate
from humans.domain.services import BlockService, CollectionService
from humans.infrastructure.api.dependencies import AuthenticatedUser
from humans.infrastructure.api.schemas import (
    BlockCreateRequest,
    BlockLayoutRequest,
    BlockPublishRequest,
    BlockReorderRequest,
    BlockResponse,
    BlockToggleResponse,
    BlockUpdateRequest,
    MoveBlockRequest,
)
from humans.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[BlockResponse])
async def list_blocks(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> list[BlockResponse]:
    """List all of the caller's blocks in position order."""
    blocks = await BlockService(session, current_user.user_id).list_blocks(current_user.user_id)
    return [BlockResponse.model_validate(block) for block in blocks]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=BlockResponse,
    responses={
        400: {"description": "Invalid content, config or slug"},
        409: {"description": "Slug taken or bio block already exists"},
        428: {"description": "Profile setup required"},
    },
)
async def create_block(
    request: BlockCreateRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlockResponse:
    """Create a block for the caller."""
    block = await BlockService(session, current_user.user_id).create_block_with_slug(
        current_user.user_id,
        request.block_type.value,
        request.content,
        title=request.title,
        slug=request.slug,
        generate_slug=request.generate_slug,
        position=request.position,
        config=request.config,
        is_published=request.is_published,
    )
    return BlockResponse.model_validate(block)


@router.post(
    "/publish",
    status_code=status.HTTP_201_CREATED,
    response_model=BlockResponse,
    responses={
        400: {"description": "Invalid content, config or slug"},
        409: {"description": "Slug taken or bio block already exists"},
        428: {"description": "Profile setup required"},
    },
)
async def create_and_publish_block(
    request: BlockPublishRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlockResponse:
    """Create a block at the end of the caller's list and publish it."""
    block = await BlockService(session, current_user.user_id).create_and_publish_block(
        current_user.user_id,
        request.block_type.value,
        request.content,
        title=request.title,
        slug=request.slug,
        generate_slug=request.generate_slug,
        config=request.config,
    )
    return BlockResponse.model_validate(block)


@router.get("/drafts", response_model=list[BlockResponse])
async def list_draft_blocks(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> list[BlockResponse]:
    """List the caller's unpublished blocks, most recently edited first."""
    service = BlockService(session, current_user.user_id)
    blocks = await service.get_draft_blocks(current_user.user_id)
    return [BlockResponse.model_validate(block) for block in blocks]


@router.get("/published", response_model=list[BlockResponse])
async def list_published_blocks(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> list[BlockResponse]:
    """List the caller's published blocks in position order."""
    service = BlockService(session, current_user.user_id)
    blocks = await service.get_published_blocks(current_user.user_id)
    return [BlockResponse.model_validate(block) for block in blocks]


@router.put(
    "/order",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={409: {"description": "Some blocks could not be reordered"}},
)
async def reorder_blocks(
    request: BlockReorderRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> None:
    """Set new dashboard positions for a batch of the caller's blocks.

    Every item is attempted; items that fail are reported together and the
    others stay applied.
    """
    updates = [BlockPositionUpdate(id=item.id, position=item.position) for item in request.blocks]
    await BlockService(session, current_user.user_id).reorder_blocks(
        current_user.user_id, updates
    )


@router.put(
    "/layout",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        403: {"description": "Some blocks do not belong to the caller"},
        409: {"description": "Some block layouts could not be updated"},
    },
)
async def update_block_layout(
    request: BlockLayoutRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> None:
    """Set public visibility and order for a batch of the caller's blocks."""
    updates = [
        BlockLayoutUpdate(id=item.id, is_visible=item.is_visible, display_order=item.display_order)
        for item in request.blocks
    ]
    await BlockService(session, current_user.user_id).update_block_layout(
        current_user.user_id, updates
    )


@router.get("/{block_id}", response_model=BlockResponse, responses={404: {"description": "Not found"}})
async def get_block(
    block_id: str,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlockResponse:
    block = await BlockService(session, current_user.user_id).get_block(block_id)
    return BlockResponse.model_validate(block)


@router.patch(
    "/{block_id}",
    response_model=BlockResponse,
    responses={
        400: {"description": "Validation error"},
        403: {"description": "Block belongs to another user"},
        404: {"description": "Not found"},
        409: {"description": "Slug taken"},
    },
)
async def update_block(
    block_id: str,
    request: BlockUpdateRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlockResponse:
    """Apply a partial update; only fields present in the body are written."""
    changes = request.model_dump(exclude_unset=True)
    block = await BlockService(session, current_user.user_id).update_block(block_id, changes)
    return BlockResponse.model_validate(block)


@router.delete("/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_block(
    block_id: str,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> None:
    await BlockService(session, current_user.user_id).delete_block(block_id)


@router.post("/{block_id}/publish", response_model=BlockResponse)
async def publish_block(
    block_id: str,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlockResponse:
    block = await BlockService(session, current_user.user_id).publish_block(block_id)
    return BlockResponse.model_validate(block)


@router.post("/{block_id}/unpublish", response_model=BlockResponse)
async def unpublish_block(
    block_id: str,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlockResponse:
    block = await BlockService(session, current_user.user_id).unpublish_block(block_id)
    return BlockResponse.model_validate(block)


@router.post("/{block_id}/toggle", response_model=BlockToggleResponse)
async def toggle_block_publication(
    block_id: str,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlockToggleResponse:
    """Flip the publication state and return the new one."""
    is_published = await BlockService(session, current_user.user_id).toggle_block_publication(
        block_id
    )
    return BlockToggleResponse(id=block_id, is_published=is_published)


@router.put(
    "/{block_id}/collection",
    response_model=BlockResponse,
    responses={
        403: {"description": "Block or collection belongs to another user"},
        404: {"description": "Block or collection not found"},
    },
)
async def move_block_to_collection(
    block_id: str,
    request: MoveBlockRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> BlockResponse:
    """Assign the block to a collection, or to none with a null collection_id."""
    block = await CollectionService(session, current_user.user_id).move_block_to_collection(
        block_id, request.collection_id
    )
    return BlockResponse.model_validate(block)
