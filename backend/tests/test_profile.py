"""
Tests for the authenticated user's profile.
"""

import pytest
from httpx import AsyncClient

from eventhub.core.security import create_access_token


@pytest.mark.asyncio
async def test_get_profile(client: AsyncClient, auth_headers, test_user):
    response = await client.get("/api/v1/profile/", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {
        "id": test_user.id,
        "full_name": "Test User",
        "email": "test@example.com",
        "phone": None,
    }


@pytest.mark.asyncio
async def test_update_profile_partial(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/v1/profile/", json={"phone": "+49 30 1234567"}, headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["phone"] == "+49 30 1234567"
    assert data["full_name"] == "Test User"

    response = await client.put(
        "/api/v1/profile/", json={"full_name": "Renamed"}, headers=auth_headers,
    )
    assert response.json()["full_name"] == "Renamed"
    assert response.json()["phone"] == "+49 30 1234567"


@pytest.mark.asyncio
async def test_profile_is_per_user(client: AsyncClient, auth_headers, other_headers):
    await client.put("/api/v1/profile/", json={"full_name": "Changed"}, headers=other_headers)

    response = await client.get("/api/v1/profile/", headers=auth_headers)
    assert response.json()["full_name"] == "Test User"


@pytest.mark.asyncio
async def test_profile_requires_auth(client: AsyncClient):
    response = await client.get("/api/v1/profile/")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_profile_missing(client: AsyncClient):
    token = create_access_token(data={"sub": "ghost-user"})
    response = await client.get("/api/v1/profile/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
