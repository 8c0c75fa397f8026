"""Pydantic schemas for the public page endpoints."""

from pydantic import BaseModel

from humans.infrastructure.api.schemas.block_schemas import BlockResponse
from humans.infrastructure.api.schemas.collection_schemas import CollectionResponse
from humans.infrastructure.api.schemas.profile_schemas import PublicProfileResponse


class PublicPageResponse(BaseModel):
    profile: PublicProfileResponse
    blocks: list[BlockResponse]
    collections: list[CollectionResponse]


class PageMetadataResponse(BaseModel):
    title: str
    description: str
    canonical_path: str


class BlockPageResponse(BaseModel):
    """An individual text block page with its author header."""

    profile: PublicProfileResponse
    block: BlockResponse
    bio_block: BlockResponse | None = None
    metadata: PageMetadataResponse
