"""Integration tests for the collection endpoints."""

import pytest

COLLECTIONS_URL = "/api/v1/collections"


class TestCollections:
    @pytest.mark.asyncio
    async def test_create_list_and_group(self, client, owner_headers):
        created = await client.post(
            COLLECTIONS_URL, headers=owner_headers, json={"name": "Writing"}
        )
        assert created.status_code == 201
        collection_id = created.json()["id"]

        block = await client.post(
            "/api/v1/blocks",
            headers=owner_headers,
            json={"block_type": "text", "content": {"text": "x"}},
        )
        moved = await client.put(
            f"/api/v1/blocks/{block.json()['id']}/collection",
            headers=owner_headers,
            json={"collection_id": collection_id},
        )
        grouped = await client.get(f"{COLLECTIONS_URL}/grouped", headers=owner_headers)

        assert moved.json()["collection_id"] == collection_id
        assert list(grouped.json()["blocks_by_collection"]) == [collection_id]
        assert grouped.json()["uncategorized_blocks"] == []

    @pytest.mark.asyncio
    async def test_default_collection(self, client, owner_headers):
        response = await client.post(f"{COLLECTIONS_URL}/default", headers=owner_headers)

        assert response.status_code == 201
        assert response.json()["name"] == "Uncategorized"
        assert response.json()["display_order"] == 999

    @pytest.mark.asyncio
    async def test_delete_keeps_blocks(self, client, owner_headers):
        collection = (
            await client.post(COLLECTIONS_URL, headers=owner_headers, json={"name": "Temp"})
        ).json()
        block = (
            await client.post(
                "/api/v1/blocks",
                headers=owner_headers,
                json={"block_type": "text", "content": {"text": "x"}},
            )
        ).json()
        await client.put(
            f"/api/v1/blocks/{block['id']}/collection",
            headers=owner_headers,
            json={"collection_id": collection["id"]},
        )

        response = await client.delete(f"{COLLECTIONS_URL}/{collection['id']}", headers=owner_headers)
        listing = await client.get("/api/v1/blocks", headers=owner_headers)
        collections = await client.get(COLLECTIONS_URL, headers=owner_headers)

        assert response.status_code == 204
        assert listing.json()[0]["collection_id"] is None
        assert collections.json() == []

    @pytest.mark.asyncio
    async def test_foreign_collection(self, client, owner_headers, other_headers):
        collection = (
            await client.post(COLLECTIONS_URL, headers=owner_headers, json={"name": "Mine"})
        ).json()

        response = await client.patch(
            f"{COLLECTIONS_URL}/{collection['id']}", headers=other_headers, json={"name": "Stolen"}
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_patch_null_is_public(self, client, owner_headers):
        collection = (
            await client.post(
                COLLECTIONS_URL, headers=owner_headers, json={"name": "Mine", "is_public": True}
            )
        ).json()

        response = await client.patch(
            f"{COLLECTIONS_URL}/{collection['id']}", headers=owner_headers, json={"is_public": None}
        )

        assert response.status_code == 400
        assert response.json()["field"] == "is_public"
        assert response.json()["code"] == "null_not_allowed"
        fetched = await client.get(f"{COLLECTIONS_URL}/{collection['id']}", headers=owner_headers)
        assert fetched.json()["is_public"] is True
