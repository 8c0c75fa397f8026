"""Public page resolution.

Resolves what anonymous visitors see: a profile's page by username, and
a single block page by username plus a slug or block ID. None of these
reads require a signed-in caller, and a missing profile or block is
returned as None rather than raised.
"""

import re
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.domain.entities import BlockPage, BlockType, PublicPage
from humans.domain.services.block_content import strip_tags
from humans.domain.services.slug_generator import SlugGenerator
from humans.infrastructure.persistence.models import BlockModel, ProfileModel
from humans.infrastructure.persistence.repositories import (
    BlockRepository,
    CollectionRepository,
    ProfileRepository,
)

logger = get_logger(__name__)

DESCRIPTION_LENGTH = 160


@dataclass
class PageMetadata:
    """Title, description and canonical path of a block page."""

    title: str
    description: str
    canonical_path: str


class PublicPageService:
    """Read-only service behind the public profile and block pages."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.profile_repository = ProfileRepository(session)
        self.block_repository = BlockRepository(session)
        self.collection_repository = CollectionRepository(session)

    async def get_public_profile(self, username: str) -> ProfileModel | None:
        return await self.profile_repository.get_by_username(username)

    async def get_public_user_blocks(self, profile_id: str) -> list[BlockModel]:
        """List the blocks shown on a profile's page.

        Only published and visible blocks, by display_order (nulls last)
        then position.
        """
        return await self.block_repository.list_public(profile_id)

    async def get_block_by_slug_or_id(self, profile_id: str, token: str) -> BlockModel | None:
        """Find a published block of a profile by slug or by ID.

        A token shaped like a UUID is looked up as an ID, anything else as
        a slug.
        """
        if SlugGenerator.is_uuid(token):
            return await self.block_repository.get_published_by_id(profile_id, token)
        return await self.block_repository.get_published_by_slug(profile_id, token)

    async def get_public_page(self, username: str) -> PublicPage | None:
        """Resolve everything shown on a profile's main page."""
        profile = await self.get_public_profile(username)
        if profile is None:
            return None
        blocks = await self.get_public_user_blocks(profile.id)
        collections = await self.collection_repository.list_public(profile.id)
        return PublicPage(profile=profile, blocks=blocks, collections=collections)

    async def resolve_block_page(self, username: str, token: str) -> BlockPage | None:
        """Resolve an individual block page.

        Only text blocks have their own page. A block reached by its ID
        that also has a slug resolves to a redirect to
        ``/<username>/<slug>``.

        Args:
            username: Profile username from the URL.
            token: Slug or block ID from the URL.

        Returns:
            The page, a redirect page, or None when nothing is there.
        """
        profile = await self.get_public_profile(username)
        if profile is None:
            return None

        block = await self.get_block_by_slug_or_id(profile.id, token)
        if block is None or block.block_type != BlockType.TEXT.value:
            return None

        if SlugGenerator.is_uuid(token) and block.slug:
            redirect_to = f"/{profile.username}/{block.slug}"
            logger.debug("Redirecting block page to slug URL", block_id=block.id, redirect_to=redirect_to)
            return BlockPage(profile=profile, block=block, redirect_to=redirect_to)

        bio_block = await self.block_repository.get_bio_block(profile.id, published_only=True)
        return BlockPage(profile=profile, block=block, bio_block=bio_block)


def describe_block_page(page: BlockPage) -> PageMetadata:
    """Build the title and description shown for a block page."""
    profile = page.profile
    author_name = profile.display_name or profile.username
    title = f"{page.block.title or 'Untitled'} | {author_name}"
    text = str(page.block.content.get("text", ""))
    description = re.sub(r"\s+", " ", strip_tags(text)).strip()[:DESCRIPTION_LENGTH]
    address = page.block.slug or page.block.id
    return PageMetadata(
        title=title,
        description=description,
        canonical_path=f"/{profile.username}/{address}",
    )
