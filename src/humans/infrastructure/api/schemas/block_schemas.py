"""Pydantic schemas for block endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from humans.domain.entities import BlockType


class BlockResponse(BaseModel):
    """A block as stored."""

    id: str
    user_id: str
    position: int
    display_order: int | None = None
    block_type: str
    title: str | None = None
    slug: str | None = None
    content: dict[str, Any]
    config: dict[str, Any]
    is_published: bool
    is_visible: bool
    collection_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BlockCreateRequest(BaseModel):
    """Request body for creating a block.

    Without a position the block is appended after the caller's last block.
    """

    block_type: BlockType
    content: dict[str, Any] = Field(default_factory=dict)
    title: str | None = Field(None, max_length=255)
    config: dict[str, Any] | None = None
    position: int | None = Field(None, ge=0)
    slug: str | None = Field(None, max_length=100)
    generate_slug: bool = Field(False, description="Derive a slug from the title")
    is_published: bool = False


class BlockPublishRequest(BaseModel):
    """Request body for creating a block that goes live immediately."""

    block_type: BlockType
    content: dict[str, Any] = Field(default_factory=dict)
    title: str | None = Field(None, max_length=255)
    config: dict[str, Any] | None = None
    slug: str | None = Field(None, max_length=100)
    generate_slug: bool = False


class BlockUpdateRequest(BaseModel):
    """Partial update of a block; only fields present in the body are written."""

    title: str | None = Field(None, max_length=255)
    content: dict[str, Any] | None = None
    config: dict[str, Any] | None = None
    position: int | None = Field(None, ge=0)
    slug: str | None = Field(None, max_length=100)
    is_published: bool | None = None
    is_visible: bool | None = None
    display_order: int | None = None
    collection_id: str | None = None


class BlockPositionItem(BaseModel):
    id: str
    position: int = Field(..., ge=0)


class BlockReorderRequest(BaseModel):
    """New dashboard positions for a batch of blocks."""

    blocks: list[BlockPositionItem]


class BlockLayoutItem(BaseModel):
    id: str
    is_visible: bool
    display_order: int | None = None


class BlockLayoutRequest(BaseModel):
    """New public visibility and order for a batch of blocks."""

    blocks: list[BlockLayoutItem]


class BlockToggleResponse(BaseModel):
    id: str
    is_published: bool


class MoveBlockRequest(BaseModel):
    collection_id: str | None = Field(None, description="Null moves the block to uncategorized")
