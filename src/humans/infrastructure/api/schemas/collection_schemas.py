"""Pydantic schemas for collection endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from humans.infrastructure.api.schemas.block_schemas import BlockResponse


class CollectionResponse(BaseModel):
    id: str
    user_id: str
    name: str
    slug: str | None = None
    description: str | None = None
    is_public: bool
    display_order: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CollectionCreateRequest(BaseModel):
    """Request body for creating a collection.

    Without display_order the collection is placed after the last one.
    """

    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=100)
    description: str | None = None
    is_public: bool = False
    display_order: int | None = None


class CollectionUpdateRequest(BaseModel):
    """Partial update of a collection."""

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=100)
    description: str | None = None
    is_public: bool | None = None
    display_order: int | None = None


class BlocksByCollectionResponse(BaseModel):
    """A user's blocks grouped by collection."""

    collections: list[CollectionResponse]
    blocks_by_collection: dict[str, list[BlockResponse]]
    uncategorized_blocks: list[BlockResponse]
