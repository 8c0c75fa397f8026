"""Integration tests for the onboarding endpoints."""

import pytest

ONBOARDING_URL = "/api/v1/onboarding"


class TestOnboardingApi:
    @pytest.mark.asyncio
    async def test_step_flow(self, client, owner_headers):
        initial = await client.get(ONBOARDING_URL, headers=owner_headers)
        step = await client.post(f"{ONBOARDING_URL}/steps/welcome", headers=owner_headers)

        assert initial.json()["completion_percentage"] == 0
        assert step.json()["completion_percentage"] == 25
        assert step.json()["last_step_completed"] == "welcome"

    @pytest.mark.asyncio
    async def test_patch_and_complete(self, client, owner_headers):
        response = await client.patch(
            ONBOARDING_URL,
            headers=owner_headers,
            json={
                "has_seen_welcome": True,
                "has_created_bio": True,
                "has_seen_dashboard_tour": True,
                "has_published_first_block": True,
            },
        )

        assert response.json()["completion_percentage"] == 100
        assert response.json()["onboarding_completed_at"] is not None

    @pytest.mark.asyncio
    async def test_unknown_step(self, client, owner_headers):
        response = await client.post(f"{ONBOARDING_URL}/steps/bogus", headers=owner_headers)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_reset(self, client, owner_headers):
        await client.post(f"{ONBOARDING_URL}/steps/onboarding_complete", headers=owner_headers)

        response = await client.post(f"{ONBOARDING_URL}/reset", headers=owner_headers)

        assert response.json()["completion_percentage"] == 0
        assert response.json()["onboarding_completed_at"] is None
