"""Block service for business logic.

Creates, updates, publishes, reorders and deletes a user's blocks. Every
operation checks the caller's identity and re-checks ownership of the
blocks it touches before writing.
"""

import uuid
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.domain.entities import BlockLayoutUpdate, BlockPositionUpdate, BlockType
from humans.domain.exceptions import (
    AuthorizationError,
    BatchItemFailure,
    BatchUpdateError,
    BioBlockExistsError,
    NotFoundError,
    SlugTakenError,
    ValidationError,
)
from humans.domain.services.block_content import validate_block_config, validate_block_content
from humans.domain.services.ownership import require_identity, require_owner, require_self
from humans.domain.services.profile_service import ProfileService
from humans.domain.services.slug_generator import SlugGenerator
from humans.domain.services.slug_resolver import SlugResolver
from humans.infrastructure.persistence.models import BlockModel
from humans.infrastructure.persistence.repositories import (
    BlockRepository,
    CollectionRepository,
)

logger = get_logger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "content",
        "config",
        "position",
        "slug",
        "is_published",
        "is_visible",
        "display_order",
        "collection_id",
    }
)
# Columns that are NOT NULL; an explicit null in an update is refused
NON_NULLABLE_FIELDS = frozenset({"content", "config", "position", "is_published", "is_visible"})


class BlockService:
    """Service for block business logic."""

    def __init__(self, session: AsyncSession, current_user_id: str | None) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            current_user_id: The signed-in caller, if any.
        """
        self.session = session
        self.current_user_id = current_user_id
        self.repository = BlockRepository(session)
        self.collection_repository = CollectionRepository(session)
        self.slug_resolver = SlugResolver(session)

    async def _load_owned(self, block_id: str, action: str) -> BlockModel:
        block = await self.repository.get_by_id(block_id)
        require_owner(
            self.current_user_id,
            block.user_id if block else None,
            resource="block",
            action=action,
        )
        return block

    async def _check_slug(self, owner_id: str, slug: str, exclude_block_id: str | None = None) -> None:
        errors = SlugGenerator.validate(slug)
        if errors:
            raise ValidationError(errors[0].message, field=errors[0].field, code=errors[0].code)
        if not await self.slug_resolver.is_slug_available(owner_id, slug, exclude_block_id):
            raise SlugTakenError(slug)

    async def _check_collection(self, owner_id: str, collection_id: str) -> None:
        collection = await self.collection_repository.get_by_id(collection_id)
        require_owner(
            owner_id,
            collection.user_id if collection else None,
            resource="collection",
            action="add blocks to",
        )

    async def get_block(self, block_id: str) -> BlockModel:
        """Get one of the caller's blocks.

        Raises:
            NotFoundError: If the block does not exist.
            AuthorizationError: If the block belongs to someone else.
        """
        return await self._load_owned(block_id, "read")

    async def list_blocks(self, owner_id: str) -> list[BlockModel]:
        """List all of the owner's blocks by ascending position.

        Raises:
            AuthorizationError: If the caller is not the owner.
        """
        require_self(self.current_user_id, owner_id, action="fetch blocks")
        return await self.repository.list_by_owner(owner_id)

    async def get_draft_blocks(self, owner_id: str) -> list[BlockModel]:
        """List unpublished blocks, most recently updated first."""
        require_self(self.current_user_id, owner_id, action="fetch draft blocks")
        return await self.repository.list_drafts(owner_id)

    async def get_published_blocks(self, owner_id: str) -> list[BlockModel]:
        """List published blocks by position."""
        require_self(self.current_user_id, owner_id, action="fetch published blocks")
        return await self.repository.list_published(owner_id)

    async def create_block(
        self,
        owner_id: str,
        block_type: str,
        content: dict[str, Any],
        position: int = 0,
        title: str | None = None,
        config: dict[str, Any] | None = None,
        is_published: bool = False,
        slug: str | None = None,
    ) -> BlockModel:
        """Create a block for the caller.

        Blocks are drafts unless ``is_published`` is passed. Bio blocks
        never carry a slug, and a second bio block is refused.

        Args:
            owner_id: Owner of the new block; must be the caller.
            block_type: One of the implemented block types.
            content: Payload matching the block type.
            position: Dashboard position.
            title: Optional title.
            config: Optional presentational hints.
            is_published: Publish immediately instead of saving a draft.
            slug: Optional slug, already validated by the caller.

        Returns:
            The created block.

        Raises:
            AuthenticationRequiredError: If nobody is signed in.
            AuthorizationError: If owner_id is not the caller.
            ProfileSetupRequiredError: If the caller has no username yet.
            BlockContentError: If content or config are invalid.
            BioBlockExistsError: If the caller already has a bio block.
            SlugTakenError: If the slug is taken in the caller's scope.
        """
        caller_id = require_identity(self.current_user_id)
        if owner_id != caller_id:
            logger.warning(
                "Rejected block creation for another user",
                user_id=caller_id,
                owner_id=owner_id,
            )
            raise AuthorizationError("Unauthorized: Cannot create block for another user")

        await ProfileService(self.session, caller_id).require_profile_setup()

        normalized_content = validate_block_content(block_type, content)
        normalized_config = validate_block_config(config)

        if block_type == BlockType.BIO.value:
            slug = None
            existing_bio = await self.repository.get_bio_block(owner_id)
            if existing_bio is not None:
                raise BioBlockExistsError(existing_bio.id)

        block = BlockModel(
            id=str(uuid.uuid4()),
            user_id=owner_id,
            position=position,
            block_type=block_type,
            title=title,
            slug=slug,
            content=normalized_content,
            config=normalized_config,
            is_published=is_published,
            is_visible=True,
        )
        try:
            async with self.session.begin_nested():
                created = await self.repository.create(block)
        except IntegrityError as e:
            if slug:
                raise SlugTakenError(slug) from e
            raise

        await self.session.commit()
        logger.info(
            "Block created",
            block_id=created.id,
            user_id=owner_id,
            block_type=block_type,
            is_published=is_published,
        )
        return created

    async def create_block_with_slug(
        self,
        owner_id: str,
        block_type: str,
        content: dict[str, Any],
        title: str | None = None,
        slug: str | None = None,
        generate_slug: bool = False,
        position: int | None = None,
        config: dict[str, Any] | None = None,
        is_published: bool = False,
    ) -> BlockModel:
        """Create a block, resolving its slug first.

        An explicit slug must be valid and free. Without one, ``generate_slug``
        derives an available slug from the title. Bio blocks get no slug.
        Without a position the block is appended after the last one.

        Raises:
            ValidationError: If the explicit slug is malformed.
            SlugTakenError: If the explicit slug is already used.
        """
        caller_id = require_identity(self.current_user_id)
        if owner_id != caller_id:
            raise AuthorizationError("Unauthorized: Cannot create block for another user")

        if block_type == BlockType.BIO.value:
            slug = None
        elif slug:
            await self._check_slug(owner_id, slug)
        elif generate_slug:
            slug = await self.slug_resolver.generate_available_slug(owner_id, title or "")

        if position is None:
            position = await self.next_position(owner_id)

        return await self.create_block(
            owner_id,
            block_type,
            content,
            position=position,
            title=title,
            config=config,
            is_published=is_published,
            slug=slug,
        )

    async def create_and_publish_block(
        self,
        owner_id: str,
        block_type: str,
        content: dict[str, Any],
        title: str | None = None,
        slug: str | None = None,
        generate_slug: bool = False,
        config: dict[str, Any] | None = None,
    ) -> BlockModel:
        """Create a block at the end of the list and publish it immediately."""
        require_self(self.current_user_id, owner_id, action="create block")
        return await self.create_block_with_slug(
            owner_id,
            block_type,
            content,
            title=title,
            slug=slug,
            generate_slug=generate_slug,
            position=await self.next_position(owner_id),
            config=config,
            is_published=True,
        )

    async def next_position(self, owner_id: str) -> int:
        max_position = await self.repository.max_position(owner_id)
        return 0 if max_position is None else max_position + 1

    async def update_block(self, block_id: str, changes: dict[str, Any]) -> BlockModel:
        """Apply a partial update to one of the caller's blocks.

        Only keys present in ``changes`` are written; updated_at is always
        refreshed. Content is validated against the block's type, a slug
        against the slug rules and the owner's other blocks, and a
        collection against ownership.

        Args:
            block_id: Block to update.
            changes: Subset of title, content, config, position, slug,
                is_published, is_visible, display_order, collection_id.

        Returns:
            The updated block.

        Raises:
            NotFoundError: If the block does not exist.
            AuthorizationError: If the block or target collection belongs
                to someone else.
            ValidationError: If a field is unknown or invalid.
            SlugTakenError: If the slug is taken by another block.
        """
        block = await self._load_owned(block_id, "update")
        owner_id = block.user_id

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown block fields: {', '.join(sorted(unknown))}",
                code="unknown_fields",
            )
        for field in sorted(NON_NULLABLE_FIELDS.intersection(changes)):
            if changes[field] is None:
                raise ValidationError(
                    f"Block {field} cannot be null", field=field, code="null_not_allowed"
                )

        values = dict(changes)
        if "content" in values:
            values["content"] = validate_block_content(block.block_type, values["content"])
        if "config" in values:
            values["config"] = validate_block_config(values["config"])
        if values.get("slug") is not None:
            if block.block_type == BlockType.BIO.value:
                raise ValidationError("Bio blocks cannot have a slug", field="slug", code="slug_not_allowed")
            await self._check_slug(owner_id, values["slug"], exclude_block_id=block_id)
        if values.get("collection_id") is not None:
            await self._check_collection(owner_id, values["collection_id"])

        try:
            async with self.session.begin_nested():
                matched = await self.repository.update_fields(owner_id, block_id, values)
        except IntegrityError as e:
            if values.get("slug"):
                raise SlugTakenError(values["slug"]) from e
            raise
        if matched == 0:
            raise NotFoundError("Block not found")

        await self.session.commit()
        await self.session.refresh(block)
        logger.info("Block updated", block_id=block_id, user_id=owner_id, fields=sorted(values))
        return block

    async def delete_block(self, block_id: str) -> None:
        """Hard delete one of the caller's blocks."""
        block = await self._load_owned(block_id, "delete")
        await self.repository.delete(block.user_id, block_id)
        await self.session.commit()
        logger.info("Block deleted", block_id=block_id, user_id=block.user_id)

    async def publish_block(self, block_id: str) -> BlockModel:
        await self._load_owned(block_id, "publish")
        return await self.update_block(block_id, {"is_published": True})

    async def unpublish_block(self, block_id: str) -> BlockModel:
        await self._load_owned(block_id, "unpublish")
        return await self.update_block(block_id, {"is_published": False})

    async def toggle_block_publication(self, block_id: str) -> bool:
        """Flip a block between draft and published.

        Returns:
            The new is_published value.
        """
        block = await self._load_owned(block_id, "toggle visibility of")
        new_state = not block.is_published
        await self.update_block(block_id, {"is_published": new_state})
        return new_state

    async def _apply_batch(
        self,
        owner_id: str,
        updates: list[tuple[str, dict[str, Any]]],
        operation: str,
        failure_message: str,
    ) -> None:
        """Apply per-block updates one by one and report failures together.

        Each update is scoped by block id and owner and runs in its own
        savepoint. Every item is attempted; updates that succeeded stay
        committed even when others fail. An item matching no row counts as
        failed.

        Raises:
            BatchUpdateError: If any item failed.
        """
        failures: list[BatchItemFailure] = []
        for block_id, values in updates:
            try:
                async with self.session.begin_nested():
                    matched = await self.repository.update_fields(owner_id, block_id, values)
            except SQLAlchemyError as e:
                failures.append(BatchItemFailure(id=block_id, reason=str(e)))
                continue
            if matched == 0:
                failures.append(BatchItemFailure(id=block_id, reason="Block not found"))

        await self.session.commit()

        if failures:
            logger.error(
                "Batch update partially failed",
                operation=operation,
                user_id=owner_id,
                failed_ids=[failure.id for failure in failures],
                attempted=len(updates),
            )
            raise BatchUpdateError(failure_message, failures)

        logger.info("Batch update applied", operation=operation, user_id=owner_id, count=len(updates))

    async def reorder_blocks(self, owner_id: str, updates: list[BlockPositionUpdate]) -> None:
        """Set new dashboard positions for the owner's blocks.

        Not atomic: see ``_apply_batch``.

        Raises:
            AuthorizationError: If the caller is not the owner.
            BatchUpdateError: If some position updates failed.
        """
        require_self(self.current_user_id, owner_id, action="reorder blocks")
        await self._apply_batch(
            owner_id,
            [(update.id, {"position": update.position}) for update in updates],
            "reorder",
            "Failed to reorder some blocks",
        )

    async def update_block_layout(self, owner_id: str, updates: list[BlockLayoutUpdate]) -> None:
        """Set public visibility and display order for the owner's blocks.

        Every referenced block must belong to the owner; otherwise nothing
        is written.

        Raises:
            AuthorizationError: If the caller is not the owner or a block is
                missing or foreign.
            BatchUpdateError: If some layout updates failed.
        """
        require_self(self.current_user_id, owner_id, action="update layout")

        requested_ids = {update.id for update in updates}
        owned_ids = await self.repository.owned_ids(owner_id, list(requested_ids))
        if owned_ids != requested_ids:
            logger.warning(
                "Rejected layout update with foreign or missing blocks",
                user_id=owner_id,
                block_ids=sorted(requested_ids - owned_ids),
            )
            raise AuthorizationError("Some blocks do not exist or do not belong to user")

        await self._apply_batch(
            owner_id,
            [
                (
                    update.id,
                    {"is_visible": update.is_visible, "display_order": update.display_order},
                )
                for update in updates
            ],
            "layout",
            "Failed to update some block layouts",
        )
