"""Collection repository for database operations."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from humans.infrastructure.persistence.models import CollectionModel


class CollectionRepository:
    """Repository for collection database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, collection: CollectionModel) -> CollectionModel:
        """Create a new collection.

        Args:
            collection: Collection model to create.

        Returns:
            Created collection model.
        """
        self.session.add(collection)
        await self.session.flush()
        await self.session.refresh(collection)
        return collection

    async def get_by_id(self, collection_id: str) -> CollectionModel | None:
        result = await self.session.execute(
            select(CollectionModel).where(CollectionModel.id == collection_id)
        )
        return result.scalar_one_or_none()

    async def list_by_owner(self, user_id: str) -> list[CollectionModel]:
        """List an owner's collections.

        Ordered by display_order ascending (nulls last), then created_at.

        Args:
            user_id: Owner profile ID.

        Returns:
            List of collections.
        """
        result = await self.session.execute(
            select(CollectionModel)
            .where(CollectionModel.user_id == user_id)
            .order_by(
                CollectionModel.display_order.asc().nulls_last(),
                CollectionModel.created_at.asc(),
            )
        )
        return list(result.scalars().all())

    async def list_public(self, user_id: str) -> list[CollectionModel]:
        """List an owner's public collections in display order."""
        result = await self.session.execute(
            select(CollectionModel)
            .where(
                CollectionModel.user_id == user_id,
                CollectionModel.is_public.is_(True),
            )
            .order_by(
                CollectionModel.display_order.asc().nulls_last(),
                CollectionModel.created_at.asc(),
            )
        )
        return list(result.scalars().all())

    async def max_display_order(self, user_id: str) -> int | None:
        result = await self.session.execute(
            select(func.max(CollectionModel.display_order)).where(
                CollectionModel.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def update_fields(
        self, user_id: str, collection_id: str, values: dict[str, Any]
    ) -> int:
        """Update one collection, scoped by id and owner; bumps updated_at.

        Returns:
            Number of rows matched.
        """
        result = await self.session.execute(
            update(CollectionModel)
            .where(
                CollectionModel.id == collection_id,
                CollectionModel.user_id == user_id,
            )
            .values(**values, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session="evaluate")
        )
        await self.session.flush()
        return result.rowcount

    async def delete(self, user_id: str, collection_id: str) -> int:
        result = await self.session.execute(
            delete(CollectionModel)
            .where(
                CollectionModel.id == collection_id,
                CollectionModel.user_id == user_id,
            )
            .execution_options(synchronize_session="evaluate")
        )
        await self.session.flush()
        return result.rowcount
