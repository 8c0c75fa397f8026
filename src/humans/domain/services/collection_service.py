"""Collection service for business logic.

Collections are named groupings of a user's blocks. Blocks always survive
their collection: deleting one moves its blocks back to uncategorized.
"""

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.domain.entities import BlocksByCollection
from humans.domain.exceptions import NotFoundError, ValidationError
from humans.domain.services.ownership import require_owner, require_self
from humans.domain.services.slug_generator import SlugGenerator
from humans.infrastructure.persistence.models import BlockModel, CollectionModel
from humans.infrastructure.persistence.repositories import (
    BlockRepository,
    CollectionRepository,
)

logger = get_logger(__name__)

DEFAULT_COLLECTION_NAME = "Uncategorized"
DEFAULT_COLLECTION_DESCRIPTION = "Default collection for blocks without a specific category"
DEFAULT_COLLECTION_DISPLAY_ORDER = 999

UPDATABLE_FIELDS = frozenset({"name", "slug", "description", "is_public", "display_order"})


class CollectionService:
    """Service for collection business logic."""

    def __init__(self, session: AsyncSession, current_user_id: str | None) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            current_user_id: The signed-in caller, if any.
        """
        self.session = session
        self.current_user_id = current_user_id
        self.repository = CollectionRepository(session)
        self.block_repository = BlockRepository(session)

    async def _load_owned(self, collection_id: str, action: str) -> CollectionModel:
        collection = await self.repository.get_by_id(collection_id)
        require_owner(
            self.current_user_id,
            collection.user_id if collection else None,
            resource="collection",
            action=action,
        )
        return collection

    @staticmethod
    def _validate_fields(values: dict[str, Any]) -> None:
        if "name" in values:
            name = values["name"]
            if not name or not name.strip():
                raise ValidationError("Collection name is required", field="name", code="name_required")
            if len(name) > 255:
                raise ValidationError(
                    "Collection name cannot be longer than 255 characters",
                    field="name",
                    code="name_too_long",
                )
        if "is_public" in values and values["is_public"] is None:
            raise ValidationError(
                "Collection is_public cannot be null", field="is_public", code="null_not_allowed"
            )
        if values.get("slug") is not None:
            errors = SlugGenerator.validate(values["slug"])
            if errors:
                raise ValidationError(errors[0].message, field=errors[0].field, code=errors[0].code)

    async def get_user_collections(self, owner_id: str) -> list[CollectionModel]:
        """List the owner's collections (display_order nulls last, then created_at)."""
        require_self(self.current_user_id, owner_id, action="fetch collections")
        return await self.repository.list_by_owner(owner_id)

    async def get_collection(self, collection_id: str) -> CollectionModel:
        return await self._load_owned(collection_id, "read")

    async def create_collection(
        self,
        owner_id: str,
        name: str,
        description: str | None = None,
        is_public: bool = False,
        display_order: int | None = None,
        slug: str | None = None,
    ) -> CollectionModel:
        """Create a collection for the caller.

        Without an explicit display_order the collection goes after the
        owner's last one (max + 1), or gets 0 when it is the first.

        Args:
            owner_id: Owner of the new collection; must be the caller.
            name: Collection name.
            description: Optional description.
            is_public: Whether it surfaces on the public page.
            display_order: Optional sort key.
            slug: Optional URL slug.

        Returns:
            The created collection.

        Raises:
            AuthorizationError: If owner_id is not the caller.
            ValidationError: If the name or slug is invalid.
        """
        require_self(self.current_user_id, owner_id, action="create collection")
        self._validate_fields({"name": name, "slug": slug})

        if display_order is None:
            max_order = await self.repository.max_display_order(owner_id)
            display_order = 0 if max_order is None else max_order + 1

        collection = CollectionModel(
            id=str(uuid.uuid4()),
            user_id=owner_id,
            name=name,
            slug=slug,
            description=description,
            is_public=is_public,
            display_order=display_order,
        )
        created = await self.repository.create(collection)
        await self.session.commit()

        logger.info(
            "Collection created",
            collection_id=created.id,
            user_id=owner_id,
            display_order=display_order,
        )
        return created

    async def create_default_collection(self, owner_id: str) -> CollectionModel:
        """Create the cosmetic "Uncategorized" collection, ordered last.

        Blocks with no collection are uncategorized whether or not this
        record exists.
        """
        return await self.create_collection(
            owner_id,
            name=DEFAULT_COLLECTION_NAME,
            description=DEFAULT_COLLECTION_DESCRIPTION,
            is_public=False,
            display_order=DEFAULT_COLLECTION_DISPLAY_ORDER,
        )

    async def update_collection(self, collection_id: str, changes: dict[str, Any]) -> CollectionModel:
        """Apply a partial update to one of the caller's collections.

        Raises:
            NotFoundError: If the collection does not exist.
            AuthorizationError: If it belongs to someone else.
            ValidationError: If a field is unknown or invalid.
        """
        collection = await self._load_owned(collection_id, "update")

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown collection fields: {', '.join(sorted(unknown))}",
                code="unknown_fields",
            )
        self._validate_fields(changes)

        matched = await self.repository.update_fields(collection.user_id, collection_id, changes)
        if matched == 0:
            raise NotFoundError("Collection not found")
        await self.session.commit()
        await self.session.refresh(collection)

        logger.info(
            "Collection updated",
            collection_id=collection_id,
            user_id=collection.user_id,
            fields=sorted(changes),
        )
        return collection

    async def delete_collection(self, collection_id: str) -> None:
        """Delete one of the caller's collections, keeping its blocks.

        Member blocks get collection_id = null first, then the collection
        row is deleted. Both steps commit together or not at all.
        """
        collection = await self._load_owned(collection_id, "delete")
        owner_id = collection.user_id

        try:
            moved = await self.block_repository.clear_collection(owner_id, collection_id)
            await self.repository.delete(owner_id, collection_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Collection deleted",
            collection_id=collection_id,
            user_id=owner_id,
            blocks_uncategorized=moved,
        )

    async def move_block_to_collection(
        self, block_id: str, collection_id: str | None
    ) -> BlockModel:
        """Assign a block to a collection, or to none with collection_id=None.

        Both the block and the target collection must belong to the caller.
        """
        block = await self.block_repository.get_by_id(block_id)
        caller_id = require_owner(
            self.current_user_id,
            block.user_id if block else None,
            resource="block",
            action="move",
        )
        if collection_id is not None:
            await self._load_owned(collection_id, "move block to")

        matched = await self.block_repository.update_fields(
            caller_id, block_id, {"collection_id": collection_id}
        )
        if matched == 0:
            raise NotFoundError("Block not found")
        await self.session.commit()
        await self.session.refresh(block)

        logger.info(
            "Block moved to collection",
            block_id=block_id,
            collection_id=collection_id,
            user_id=caller_id,
        )
        return block

    async def get_blocks_by_collection(self, owner_id: str) -> BlocksByCollection:
        """Partition the owner's blocks by collection.

        Blocks keep their position order inside every group. A block whose
        collection_id is null lands in ``uncategorized_blocks``.
        """
        require_self(self.current_user_id, owner_id, action="fetch blocks")
        collections = await self.repository.list_by_owner(owner_id)
        blocks = await self.block_repository.list_by_owner(owner_id)

        grouped = BlocksByCollection(collections=collections)
        for block in blocks:
            if block.collection_id:
                grouped.blocks_by_collection.setdefault(block.collection_id, []).append(block)
            else:
                grouped.uncategorized_blocks.append(block)
        return grouped
