"""Integration tests for BlockService against an in-memory database."""

import pytest

from humans.domain.entities import BlockLayoutUpdate, BlockPositionUpdate
from humans.domain.exceptions import (
    AuthenticationRequiredError,
    AuthorizationError,
    BatchUpdateError,
    BioBlockExistsError,
    BlockContentError,
    NotFoundError,
    ProfileSetupRequiredError,
    SlugTakenError,
    ValidationError,
)
from humans.domain.services import BlockService
from humans.infrastructure.persistence.repositories import BlockRepository

TEXT = {"text": "hello there"}


async def create_text(service, owner_id, title, **kwargs):
    return await service.create_block_with_slug(owner_id, "text", TEXT, title=title, **kwargs)


class TestCreateBlock:
    @pytest.mark.asyncio
    async def test_creates_draft_by_default(self, db_session, owner_id):
        block = await BlockService(db_session, owner_id).create_block(owner_id, "text", TEXT)

        assert block.is_published is False
        assert block.is_visible is True
        assert block.content["word_count"] == 2
        assert block.created_at is not None

    @pytest.mark.asyncio
    async def test_requires_identity(self, db_session, owner_id):
        with pytest.raises(AuthenticationRequiredError):
            await BlockService(db_session, None).create_block(owner_id, "text", TEXT)

    @pytest.mark.asyncio
    async def test_cannot_create_for_another_user(self, db_session, owner_id, other_user_id):
        service = BlockService(db_session, other_user_id)

        with pytest.raises(AuthorizationError):
            await service.create_block(owner_id, "text", TEXT)

        assert await BlockRepository(db_session).list_by_owner(owner_id) == []

    @pytest.mark.asyncio
    async def test_requires_username(self, db_session, new_user_id):
        with pytest.raises(ProfileSetupRequiredError):
            await BlockService(db_session, new_user_id).create_block(new_user_id, "text", TEXT)

    @pytest.mark.asyncio
    async def test_rejects_malformed_content(self, db_session, owner_id):
        with pytest.raises(BlockContentError):
            await BlockService(db_session, owner_id).create_block(owner_id, "links", {"items": "x"})

    @pytest.mark.asyncio
    async def test_second_bio_block_is_refused(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        first = await service.create_block(owner_id, "bio", {"display_name": "Alice"})

        with pytest.raises(BioBlockExistsError) as exc_info:
            await service.create_block(owner_id, "bio", {"display_name": "Again"})

        assert exc_info.value.existing_block_id == first.id

    @pytest.mark.asyncio
    async def test_bio_block_never_has_slug(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        block = await service.create_block_with_slug(
            owner_id, "bio", {}, title="About me", generate_slug=True
        )
        assert block.slug is None


class TestSlugs:
    @pytest.mark.asyncio
    async def test_generated_slugs_stay_unique(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)

        first = await create_text(service, owner_id, "My Post", generate_slug=True)
        second = await create_text(service, owner_id, "My Post", generate_slug=True)

        assert first.slug == "my-post"
        assert second.slug == "my-post-2"

    @pytest.mark.asyncio
    async def test_explicit_slug_taken(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        await create_text(service, owner_id, "A", slug="same")

        with pytest.raises(SlugTakenError):
            await create_text(service, owner_id, "B", slug="same")

    @pytest.mark.asyncio
    async def test_same_slug_for_different_owners(self, db_session, owner_id, other_user_id):
        await create_text(BlockService(db_session, owner_id), owner_id, "A", slug="same")
        block = await create_text(
            BlockService(db_session, other_user_id), other_user_id, "B", slug="same"
        )
        assert block.slug == "same"

    @pytest.mark.asyncio
    async def test_invalid_explicit_slug(self, db_session, owner_id):
        with pytest.raises(ValidationError) as exc_info:
            await create_text(BlockService(db_session, owner_id), owner_id, "A", slug="Bad Slug")
        assert exc_info.value.code == "slug_invalid_chars"

    @pytest.mark.asyncio
    async def test_update_to_taken_slug(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        await create_text(service, owner_id, "A", slug="taken")
        other = await create_text(service, owner_id, "B", slug="free")

        with pytest.raises(SlugTakenError):
            await service.update_block(other.id, {"slug": "taken"})

    @pytest.mark.asyncio
    async def test_update_keeps_own_slug(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        block = await create_text(service, owner_id, "A", slug="mine")

        updated = await service.update_block(block.id, {"slug": "mine", "title": "A2"})

        assert updated.title == "A2"


class TestUpdateAndPublish:
    @pytest.mark.asyncio
    async def test_partial_update(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        block = await create_text(service, owner_id, "Title")

        updated = await service.update_block(block.id, {"content": {"text": "a b c d"}})

        assert updated.title == "Title"
        assert updated.content["word_count"] == 4

    @pytest.mark.asyncio
    async def test_unknown_field(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        block = await create_text(service, owner_id, "Title")

        with pytest.raises(ValidationError):
            await service.update_block(block.id, {"user_id": "someone-else"})

    @pytest.mark.asyncio
    async def test_foreign_block(self, db_session, owner_id, other_user_id):
        block = await create_text(BlockService(db_session, owner_id), owner_id, "Mine")

        with pytest.raises(AuthorizationError):
            await BlockService(db_session, other_user_id).update_block(block.id, {"title": "x"})
        with pytest.raises(AuthorizationError):
            await BlockService(db_session, other_user_id).delete_block(block.id)

    @pytest.mark.asyncio
    async def test_missing_block(self, db_session, owner_id):
        with pytest.raises(NotFoundError):
            await BlockService(db_session, owner_id).get_block("does-not-exist")

    @pytest.mark.asyncio
    async def test_publish_toggle(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        block = await create_text(service, owner_id, "Title")

        assert (await service.publish_block(block.id)).is_published is True
        assert await service.toggle_block_publication(block.id) is False
        assert await service.toggle_block_publication(block.id) is True
        assert (await service.unpublish_block(block.id)).is_published is False

    @pytest.mark.asyncio
    async def test_create_and_publish_appends(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        await create_text(service, owner_id, "First")
        block = await service.create_and_publish_block(owner_id, "text", TEXT, title="Second")

        assert block.is_published is True
        assert block.position == 1

    @pytest.mark.asyncio
    async def test_drafts_and_published(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        draft = await create_text(service, owner_id, "Draft")
        live = await create_text(service, owner_id, "Live", is_published=True)

        assert [b.id for b in await service.get_draft_blocks(owner_id)] == [draft.id]
        assert [b.id for b in await service.get_published_blocks(owner_id)] == [live.id]

    @pytest.mark.asyncio
    async def test_delete(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        block = await create_text(service, owner_id, "Title")

        await service.delete_block(block.id)

        assert await service.list_blocks(owner_id) == []


class TestReorder:
    @pytest.mark.asyncio
    async def test_reorder_abc_to_cab(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        a = await create_text(service, owner_id, "A")
        b = await create_text(service, owner_id, "B")
        c = await create_text(service, owner_id, "C")

        await service.reorder_blocks(
            owner_id,
            [
                BlockPositionUpdate(id=c.id, position=0),
                BlockPositionUpdate(id=a.id, position=1),
                BlockPositionUpdate(id=b.id, position=2),
            ],
        )

        assert [block.id for block in await service.list_blocks(owner_id)] == [c.id, a.id, b.id]

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_successful_items(self, db_session, owner_id, other_user_id):
        service = BlockService(db_session, owner_id)
        a = await create_text(service, owner_id, "A")
        b = await create_text(service, owner_id, "B")
        foreign = await create_text(BlockService(db_session, other_user_id), other_user_id, "X")

        with pytest.raises(BatchUpdateError) as exc_info:
            await service.reorder_blocks(
                owner_id,
                [
                    BlockPositionUpdate(id=b.id, position=0),
                    BlockPositionUpdate(id=foreign.id, position=1),
                    BlockPositionUpdate(id=a.id, position=2),
                ],
            )

        assert exc_info.value.failed_ids == [foreign.id]
        assert [block.id for block in await service.list_blocks(owner_id)] == [b.id, a.id]
        assert (await BlockRepository(db_session).get_by_id(foreign.id)).position == 0

    @pytest.mark.asyncio
    async def test_reorder_for_another_user(self, db_session, owner_id, other_user_id):
        with pytest.raises(AuthorizationError):
            await BlockService(db_session, other_user_id).reorder_blocks(owner_id, [])


class TestLayout:
    @pytest.mark.asyncio
    async def test_layout_updates_visibility_and_order(self, db_session, owner_id):
        service = BlockService(db_session, owner_id)
        a = await create_text(service, owner_id, "A")
        b = await create_text(service, owner_id, "B")

        await service.update_block_layout(
            owner_id,
            [
                BlockLayoutUpdate(id=a.id, is_visible=False, display_order=1),
                BlockLayoutUpdate(id=b.id, is_visible=True, display_order=0),
            ],
        )

        a = await service.get_block(a.id)
        assert a.is_visible is False
        assert a.display_order == 1

    @pytest.mark.asyncio
    async def test_layout_refuses_foreign_blocks(self, db_session, owner_id, other_user_id):
        service = BlockService(db_session, owner_id)
        a = await create_text(service, owner_id, "A")
        foreign = await create_text(BlockService(db_session, other_user_id), other_user_id, "X")

        with pytest.raises(AuthorizationError):
            await service.update_block_layout(
                owner_id,
                [
                    BlockLayoutUpdate(id=a.id, is_visible=False, display_order=0),
                    BlockLayoutUpdate(id=foreign.id, is_visible=False, display_order=1),
                ],
            )

        assert (await service.get_block(a.id)).is_visible is True
