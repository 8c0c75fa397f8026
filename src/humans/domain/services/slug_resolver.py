"""Slug availability resolver.

Finds a slug that is free within one owner's blocks by probing the
block store, falling back to numeric suffixes and finally a timestamp
suffix.
"""

import time

from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.domain.services.slug_generator import SlugGenerator
from humans.infrastructure.persistence.repositories import BlockRepository

logger = get_logger(__name__)


class SlugResolver:
    """Resolve available block slugs within an owner's scope.

    Availability is checked, not reserved: the (user_id, slug) unique
    constraint remains the backstop for concurrent writers.
    """

    FALLBACK_BASE = "untitled"
    MAX_NUMBERED_SUFFIX = 100

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the resolver.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.block_repo = BlockRepository(session)

    async def is_slug_available(
        self,
        owner_id: str,
        slug: str,
        exclude_block_id: str | None = None,
    ) -> bool:
        """Check whether no other block of the owner holds the slug.

        Args:
            owner_id: Owner profile ID.
            slug: Slug to probe.
            exclude_block_id: Block to ignore, for update flows.

        Returns:
            True if the slug is free.
        """
        return not await self.block_repo.slug_exists(owner_id, slug, exclude_block_id)

    async def find_available_slug(self, owner_id: str, base_slug: str) -> str:
        """Find a slug based on base_slug that is free for this owner.

        Tries the base slug, then base-2 through base-100. When all of those
        are taken the base plus the last six digits of the current epoch
        milliseconds is returned without a further check.

        Args:
            owner_id: Owner profile ID.
            base_slug: Desired slug.

        Returns:
            A slug unique among the owner's blocks at call time.
        """
        if await self.is_slug_available(owner_id, base_slug):
            return base_slug

        for counter in range(2, self.MAX_NUMBERED_SUFFIX + 1):
            candidate = f"{base_slug}-{counter}"
            if await self.is_slug_available(owner_id, candidate):
                return candidate

        suffix = str(int(time.time() * 1000))[-6:]
        fallback = f"{base_slug}-{suffix}"
        logger.warning(
            "Numbered slug variants exhausted, using timestamp suffix",
            owner_id=owner_id,
            base_slug=base_slug,
            slug=fallback,
        )
        return fallback

    async def generate_available_slug(self, owner_id: str, title: str) -> str:
        """Derive a slug from a title and make it available for this owner.

        Args:
            owner_id: Owner profile ID.
            title: Block title.

        Returns:
            An available slug; "untitled" based when the title yields nothing usable.
        """
        base_slug = SlugGenerator.generate(title)
        if not base_slug or not SlugGenerator.is_valid(base_slug):
            base_slug = self.FALLBACK_BASE
        return await self.find_available_slug(owner_id, base_slug)
