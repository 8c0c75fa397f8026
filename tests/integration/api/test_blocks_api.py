"""Integration tests for the block endpoints."""

import pytest

from humans.infrastructure.auth.jwt_service import jwt_service

BLOCKS_URL = "/api/v1/blocks"


async def create(client, headers, **body):
    payload = {"block_type": "text", "content": {"text": "hello"}}
    payload.update(body)
    response = await client.post(BLOCKS_URL, headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_appends_draft(self, client, owner_headers):
        first = await create(client, owner_headers, title="One")
        second = await create(client, owner_headers, title="Two", generate_slug=True)

        assert first["position"] == 0
        assert second["position"] == 1
        assert second["slug"] == "two"
        assert second["is_published"] is False

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.post(BLOCKS_URL, json={"block_type": "text", "content": {}})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_requires_profile_setup(self, client, new_user_id):
        token = jwt_service.create_access_token(user_id=new_user_id, email="new@example.com")

        response = await client.post(
            BLOCKS_URL,
            headers={"Authorization": f"Bearer {token}"},
            json={"block_type": "text", "content": {"text": "hi"}},
        )

        assert response.status_code == 428
        assert response.json()["redirect"] == "/dashboard?setup=required"

    @pytest.mark.asyncio
    async def test_invalid_content(self, client, owner_headers):
        response = await client.post(
            BLOCKS_URL,
            headers=owner_headers,
            json={"block_type": "text", "content": {"body": "wrong key"}},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_content"

    @pytest.mark.asyncio
    async def test_second_bio(self, client, owner_headers):
        bio = await create(client, owner_headers, block_type="bio", content={})

        response = await client.post(
            BLOCKS_URL, headers=owner_headers, json={"block_type": "bio", "content": {}}
        )

        assert response.status_code == 409
        assert response.json()["existing_block_id"] == bio["id"]

    @pytest.mark.asyncio
    async def test_create_and_publish(self, client, owner_headers):
        response = await client.post(
            f"{BLOCKS_URL}/publish",
            headers=owner_headers,
            json={"block_type": "links", "content": {"items": []}},
        )

        assert response.status_code == 201
        assert response.json()["is_published"] is True


class TestReadUpdateDelete:
    @pytest.mark.asyncio
    async def test_foreign_block_is_forbidden(self, client, owner_headers, other_headers):
        block = await create(client, owner_headers)

        response = await client.get(f"{BLOCKS_URL}/{block['id']}", headers=other_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_block(self, client, owner_headers):
        response = await client.get(f"{BLOCKS_URL}/missing", headers=owner_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_only_sent_fields(self, client, owner_headers):
        block = await create(client, owner_headers, title="Keep")

        response = await client.patch(
            f"{BLOCKS_URL}/{block['id']}", headers=owner_headers, json={"is_visible": False}
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Keep"
        assert response.json()["is_visible"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field", ["position", "is_published", "is_visible", "content", "config"]
    )
    async def test_patch_null_for_required_field(self, client, owner_headers, field):
        block = await create(client, owner_headers, title="Keep")

        response = await client.patch(
            f"{BLOCKS_URL}/{block['id']}", headers=owner_headers, json={field: None}
        )

        assert response.status_code == 400
        assert response.json()["field"] == field
        assert response.json()["code"] == "null_not_allowed"
        fetched = await client.get(f"{BLOCKS_URL}/{block['id']}", headers=owner_headers)
        assert fetched.json()[field] == block[field]

    @pytest.mark.asyncio
    async def test_toggle_and_lists(self, client, owner_headers):
        block = await create(client, owner_headers)

        toggled = await client.post(f"{BLOCKS_URL}/{block['id']}/toggle", headers=owner_headers)
        published = await client.get(f"{BLOCKS_URL}/published", headers=owner_headers)
        drafts = await client.get(f"{BLOCKS_URL}/drafts", headers=owner_headers)

        assert toggled.json() == {"id": block["id"], "is_published": True}
        assert [b["id"] for b in published.json()] == [block["id"]]
        assert drafts.json() == []

    @pytest.mark.asyncio
    async def test_delete(self, client, owner_headers):
        block = await create(client, owner_headers)

        response = await client.delete(f"{BLOCKS_URL}/{block['id']}", headers=owner_headers)
        listing = await client.get(BLOCKS_URL, headers=owner_headers)

        assert response.status_code == 204
        assert listing.json() == []


class TestBatches:
    @pytest.mark.asyncio
    async def test_reorder(self, client, owner_headers):
        a = await create(client, owner_headers, title="A")
        b = await create(client, owner_headers, title="B")
        c = await create(client, owner_headers, title="C")

        response = await client.put(
            f"{BLOCKS_URL}/order",
            headers=owner_headers,
            json={
                "blocks": [
                    {"id": c["id"], "position": 0},
                    {"id": a["id"], "position": 1},
                    {"id": b["id"], "position": 2},
                ]
            },
        )
        listing = await client.get(BLOCKS_URL, headers=owner_headers)

        assert response.status_code == 204
        assert [block["title"] for block in listing.json()] == ["C", "A", "B"]

    @pytest.mark.asyncio
    async def test_reorder_reports_failed_ids(self, client, owner_headers):
        a = await create(client, owner_headers, title="A")

        response = await client.put(
            f"{BLOCKS_URL}/order",
            headers=owner_headers,
            json={"blocks": [{"id": "ghost", "position": 0}, {"id": a["id"], "position": 1}]},
        )

        assert response.status_code == 409
        assert response.json()["failed_ids"] == ["ghost"]

    @pytest.mark.asyncio
    async def test_layout_with_foreign_block(self, client, owner_headers, other_headers):
        mine = await create(client, owner_headers)
        theirs = await create(client, other_headers)

        response = await client.put(
            f"{BLOCKS_URL}/layout",
            headers=owner_headers,
            json={
                "blocks": [
                    {"id": mine["id"], "is_visible": False, "display_order": 0},
                    {"id": theirs["id"], "is_visible": False, "display_order": 1},
                ]
            },
        )

        assert response.status_code == 403
