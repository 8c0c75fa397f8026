"""Integration tests for CollectionService."""

import pytest

from humans.domain.exceptions import AuthorizationError, NotFoundError, ValidationError
from humans.domain.services import BlockService, CollectionService


async def text_block(session, owner_id, title):
    return await BlockService(session, owner_id).create_block_with_slug(
        owner_id, "text", {"text": title}, title=title
    )


class TestCreateCollection:
    @pytest.mark.asyncio
    async def test_display_order_is_appended(self, db_session, owner_id):
        service = CollectionService(db_session, owner_id)

        first = await service.create_collection(owner_id, "Writing")
        second = await service.create_collection(owner_id, "Talks")
        pinned = await service.create_collection(owner_id, "Pinned", display_order=10)
        after = await service.create_collection(owner_id, "After")

        assert (first.display_order, second.display_order) == (0, 1)
        assert pinned.display_order == 10
        assert after.display_order == 11

    @pytest.mark.asyncio
    async def test_default_collection(self, db_session, owner_id):
        collection = await CollectionService(db_session, owner_id).create_default_collection(
            owner_id
        )

        assert collection.name == "Uncategorized"
        assert collection.display_order == 999
        assert collection.is_public is False

    @pytest.mark.asyncio
    async def test_blank_name(self, db_session, owner_id):
        with pytest.raises(ValidationError):
            await CollectionService(db_session, owner_id).create_collection(owner_id, "  ")

    @pytest.mark.asyncio
    async def test_for_another_user(self, db_session, owner_id, other_user_id):
        with pytest.raises(AuthorizationError):
            await CollectionService(db_session, other_user_id).create_collection(owner_id, "X")


class TestDeleteCollection:
    @pytest.mark.asyncio
    async def test_blocks_become_uncategorized(self, db_session, owner_id):
        collections = CollectionService(db_session, owner_id)
        collection = await collections.create_collection(owner_id, "Writing")
        first = await text_block(db_session, owner_id, "One")
        second = await text_block(db_session, owner_id, "Two")
        await collections.move_block_to_collection(first.id, collection.id)
        await collections.move_block_to_collection(second.id, collection.id)

        await collections.delete_collection(collection.id)

        blocks = await BlockService(db_session, owner_id).list_blocks(owner_id)
        assert [block.collection_id for block in blocks] == [None, None]
        assert await collections.get_user_collections(owner_id) == []

    @pytest.mark.asyncio
    async def test_foreign_collection(self, db_session, owner_id, other_user_id):
        collection = await CollectionService(db_session, owner_id).create_collection(
            owner_id, "Mine"
        )

        with pytest.raises(AuthorizationError):
            await CollectionService(db_session, other_user_id).delete_collection(collection.id)

    @pytest.mark.asyncio
    async def test_missing_collection(self, db_session, owner_id):
        with pytest.raises(NotFoundError):
            await CollectionService(db_session, owner_id).delete_collection("missing")


class TestMoveAndGroup:
    @pytest.mark.asyncio
    async def test_cannot_move_into_foreign_collection(self, db_session, owner_id, other_user_id):
        foreign = await CollectionService(db_session, other_user_id).create_collection(
            other_user_id, "Theirs"
        )
        block = await text_block(db_session, owner_id, "One")

        with pytest.raises(AuthorizationError):
            await CollectionService(db_session, owner_id).move_block_to_collection(
                block.id, foreign.id
            )

    @pytest.mark.asyncio
    async def test_grouping(self, db_session, owner_id):
        collections = CollectionService(db_session, owner_id)
        writing = await collections.create_collection(owner_id, "Writing")
        one = await text_block(db_session, owner_id, "One")
        two = await text_block(db_session, owner_id, "Two")
        three = await text_block(db_session, owner_id, "Three")
        await collections.move_block_to_collection(three.id, writing.id)
        await collections.move_block_to_collection(one.id, writing.id)

        grouped = await collections.get_blocks_by_collection(owner_id)

        assert [c.id for c in grouped.collections] == [writing.id]
        assert [b.id for b in grouped.blocks_by_collection[writing.id]] == [one.id, three.id]
        assert [b.id for b in grouped.uncategorized_blocks] == [two.id]

    @pytest.mark.asyncio
    async def test_move_back_to_uncategorized(self, db_session, owner_id):
        collections = CollectionService(db_session, owner_id)
        writing = await collections.create_collection(owner_id, "Writing")
        block = await text_block(db_session, owner_id, "One")
        await collections.move_block_to_collection(block.id, writing.id)

        moved = await collections.move_block_to_collection(block.id, None)

        assert moved.collection_id is None

    @pytest.mark.asyncio
    async def test_update_collection(self, db_session, owner_id):
        collections = CollectionService(db_session, owner_id)
        writing = await collections.create_collection(owner_id, "Writing")

        updated = await collections.update_collection(
            writing.id, {"name": "Essays", "is_public": True}
        )

        assert updated.name == "Essays"
        assert updated.is_public is True
