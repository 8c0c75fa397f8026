"""Integration tests for the profile endpoints."""

import pytest

from humans.infrastructure.api.dependencies import get_storage
from humans.infrastructure.storage import LocalStorageProvider


@pytest.fixture
def local_storage(client, tmp_path):
    from humans.infrastructure.api.app import app

    provider = LocalStorageProvider(storage_path=str(tmp_path), public_base_url="http://test")
    app.dependency_overrides[get_storage] = lambda: provider
    return provider


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_profile(self, client, owner_headers):
        response = await client.get("/api/v1/profile", headers=owner_headers)

        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    @pytest.mark.asyncio
    async def test_update_profile(self, client, owner_headers):
        response = await client.patch(
            "/api/v1/profile",
            headers=owner_headers,
            json={"username": "alice_2", "display_name": "Alice", "page_theme_preference": "dark"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "alice_2"
        assert data["display_name"] == "Alice"
        assert data["page_theme_preference"] == "dark"

    @pytest.mark.asyncio
    async def test_username_taken(self, client, owner_headers, other_user_id):
        response = await client.patch(
            "/api/v1/profile", headers=owner_headers, json={"username": "bob"}
        )

        assert response.status_code == 409
        assert response.json()["field"] == "username"

    @pytest.mark.asyncio
    async def test_reserved_username(self, client, owner_headers):
        response = await client.patch(
            "/api/v1/profile", headers=owner_headers, json={"username": "admin"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "username_reserved"

    @pytest.mark.asyncio
    async def test_username_availability(self, client, owner_headers, other_user_id):
        url = "/api/v1/profile/username-availability"

        taken = await client.get(url, params={"username": "bob"})
        own = await client.get(url, params={"username": "alice"}, headers=owner_headers)
        free = await client.get(url, params={"username": "carol"})

        assert taken.json()["is_available"] is False
        assert own.json()["is_available"] is True
        assert free.json()["is_available"] is True


class TestAvatar:
    @pytest.mark.asyncio
    async def test_upload_serve_and_delete(self, client, owner_headers, owner_id, local_storage):
        upload = await client.post(
            "/api/v1/profile/avatar",
            headers=owner_headers,
            files={"file": ("me.png", b"\x89PNG data", "image/png")},
        )

        assert upload.status_code == 201
        url = upload.json()["profile_picture_url"]
        assert url.startswith(f"http://test/files/avatars/{owner_id}/avatar-")

        served = await client.get(url.removeprefix("http://test"))
        assert served.status_code == 200
        assert served.content == b"\x89PNG data"

        deleted = await client.delete("/api/v1/profile/avatar", headers=owner_headers)
        assert deleted.status_code == 204
        profile = await client.get("/api/v1/profile", headers=owner_headers)
        assert profile.json()["profile_picture_url"] is None

    @pytest.mark.asyncio
    async def test_rejects_disallowed_type(self, client, owner_headers, local_storage):
        response = await client.post(
            "/api/v1/profile/avatar",
            headers=owner_headers,
            files={"file": ("doc.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_file_type"
