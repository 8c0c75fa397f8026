"""Block repository for database operations.

Every query that acts on a single block is scoped by owner as well as by
id, so a mismatched owner behaves like a missing row.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from humans.infrastructure.persistence.models import BlockModel


class BlockRepository:
    """Repository for block database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, block: BlockModel) -> BlockModel:
        """Insert a block and flush so database defaults are populated.

        Args:
            block: Block model to create.

        Returns:
            Created block model.
        """
        self.session.add(block)
        await self.session.flush()
        await self.session.refresh(block)
        return block

    async def get_by_id(self, block_id: str) -> BlockModel | None:
        """Get a block by ID regardless of owner.

        Used by services that load the owner before checking it.
        """
        result = await self.session.execute(select(BlockModel).where(BlockModel.id == block_id))
        return result.scalar_one_or_none()

    async def list_by_owner(self, user_id: str) -> list[BlockModel]:
        """List all of an owner's blocks by ascending position.

        Args:
            user_id: Owner profile ID.

        Returns:
            Blocks ordered by position.
        """
        result = await self.session.execute(
            select(BlockModel)
            .where(BlockModel.user_id == user_id)
            .order_by(BlockModel.position.asc(), BlockModel.created_at.asc())
        )
        return list(result.scalars().all())

    async def list_drafts(self, user_id: str) -> list[BlockModel]:
        """List unpublished blocks, most recently updated first."""
        result = await self.session.execute(
            select(BlockModel)
            .where(BlockModel.user_id == user_id, BlockModel.is_published.is_(False))
            .order_by(BlockModel.updated_at.desc())
        )
        return list(result.scalars().all())

    async def list_published(self, user_id: str) -> list[BlockModel]:
        """List published blocks by position, including hidden ones."""
        result = await self.session.execute(
            select(BlockModel)
            .where(BlockModel.user_id == user_id, BlockModel.is_published.is_(True))
            .order_by(BlockModel.position.asc())
        )
        return list(result.scalars().all())

    async def list_public(self, user_id: str) -> list[BlockModel]:
        """List blocks shown on the public page.

        Only published and visible blocks, ordered by display_order
        (nulls last) then position.

        Args:
            user_id: Owner profile ID.

        Returns:
            Public blocks in page order.
        """
        result = await self.session.execute(
            select(BlockModel)
            .where(
                BlockModel.user_id == user_id,
                BlockModel.is_published.is_(True),
                BlockModel.is_visible.is_(True),
            )
            .order_by(
                BlockModel.display_order.asc().nulls_last(),
                BlockModel.position.asc(),
            )
        )
        return list(result.scalars().all())

    async def get_published_by_id(self, user_id: str, block_id: str) -> BlockModel | None:
        result = await self.session.execute(
            select(BlockModel).where(
                BlockModel.id == block_id,
                BlockModel.user_id == user_id,
                BlockModel.is_published.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def get_published_by_slug(self, user_id: str, slug: str) -> BlockModel | None:
        result = await self.session.execute(
            select(BlockModel).where(
                BlockModel.slug == slug,
                BlockModel.user_id == user_id,
                BlockModel.is_published.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def get_bio_block(
        self, user_id: str, published_only: bool = False
    ) -> BlockModel | None:
        """Get the owner's canonical bio block (the earliest created one).

        Args:
            user_id: Owner profile ID.
            published_only: Restrict to published bio blocks.

        Returns:
            The bio block if one exists, None otherwise.
        """
        query = select(BlockModel).where(
            BlockModel.user_id == user_id,
            BlockModel.block_type == "bio",
        )
        if published_only:
            query = query.where(BlockModel.is_published.is_(True))
        result = await self.session.execute(
            query.order_by(BlockModel.created_at.asc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def slug_exists(
        self, user_id: str, slug: str, exclude_block_id: str | None = None
    ) -> bool:
        """Check whether an owner already has a block with this slug.

        Args:
            user_id: Owner profile ID.
            slug: Slug to probe.
            exclude_block_id: Block to ignore (the one being updated).

        Returns:
            True if the slug is taken in the owner's scope.
        """
        query = select(BlockModel.id).where(
            BlockModel.user_id == user_id,
            BlockModel.slug == slug,
        )
        if exclude_block_id is not None:
            query = query.where(BlockModel.id != exclude_block_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def max_position(self, user_id: str) -> int | None:
        result = await self.session.execute(
            select(func.max(BlockModel.position)).where(BlockModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def owned_ids(self, user_id: str, block_ids: list[str]) -> set[str]:
        """Return the subset of block_ids owned by user_id."""
        if not block_ids:
            return set()
        result = await self.session.execute(
            select(BlockModel.id).where(
                BlockModel.user_id == user_id,
                BlockModel.id.in_(block_ids),
            )
        )
        return set(result.scalars().all())

    async def update_fields(self, user_id: str, block_id: str, values: dict[str, Any]) -> int:
        """Update one block, scoped by id and owner.

        Always bumps updated_at.

        Args:
            user_id: Owner profile ID.
            block_id: Block to update.
            values: Column values to set.

        Returns:
            Number of rows matched (0 when missing or owned by someone else).
        """
        result = await self.session.execute(
            update(BlockModel)
            .where(BlockModel.id == block_id, BlockModel.user_id == user_id)
            .values(**values, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session="evaluate")
        )
        await self.session.flush()
        return result.rowcount

    async def clear_collection(self, user_id: str, collection_id: str) -> int:
        """Set collection_id to null on every block of the owner in a collection.

        Returns:
            Number of blocks moved to uncategorized.
        """
        result = await self.session.execute(
            update(BlockModel)
            .where(
                BlockModel.user_id == user_id,
                BlockModel.collection_id == collection_id,
            )
            .values(collection_id=None, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session="evaluate")
        )
        await self.session.flush()
        return result.rowcount

    async def delete(self, user_id: str, block_id: str) -> int:
        """Hard delete one block, scoped by id and owner.

        Returns:
            Number of rows deleted.
        """
        result = await self.session.execute(
            delete(BlockModel)
            .where(BlockModel.id == block_id, BlockModel.user_id == user_id)
            .execution_options(synchronize_session="evaluate")
        )
        await self.session.flush()
        return result.rowcount
