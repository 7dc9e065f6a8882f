"""Tests for register, login, refresh and me."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _register(client: AsyncClient, email: str = "newuser@test.com", **extra):
    return await client.post(
        "/api/auth/register",
        json={"email": email, "password": "strongpass1", "name": "New User", **extra},
    )


class TestRegister:
    async def test_defaults_to_visitor(self, client: AsyncClient):
        response = await _register(client)
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "newuser@test.com"
        assert data["user"]["role"] == "visitor"
        assert data["user"]["can_manage_properties"] is False
        assert data["tokens"]["token_type"] == "bearer"

    async def test_register_as_owner(self, client: AsyncClient):
        response = await _register(client, role="owner")
        assert response.json()["user"]["role"] == "owner"
        assert response.json()["user"]["can_manage_properties"] is True

    async def test_cannot_self_register_as_admin(self, client: AsyncClient):
        response = await _register(client, role="admin")
        assert response.status_code == 400
        assert "role" in response.json()["errors"]

    async def test_email_normalised_and_unique(self, client: AsyncClient):
        await _register(client, email="Dup@Test.com")
        response = await _register(client, email="dup@test.com")
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_short_password(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register", json={"email": "a@test.com", "password": "short", "name": "A"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Please check your input and try again"


class TestLogin:
    async def test_success(self, client: AsyncClient):
        await _register(client)
        response = await client.post(
            "/api/auth/login", json={"email": "NewUser@test.com", "password": "strongpass1"}
        )
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "newuser@test.com"

    async def test_wrong_password(self, client: AsyncClient):
        await _register(client)
        response = await client.post("/api/auth/login", json={"email": "newuser@test.com", "password": "nope-nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    async def test_unknown_email(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={"email": "ghost@test.com", "password": "whatever1"})
        assert response.status_code == 401


class TestRefreshAndMe:
    async def test_refresh(self, client: AsyncClient):
        tokens = (await _register(client)).json()["tokens"]
        response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 200
        assert response.json()["access_token"]

    async def test_refresh_rejects_access_token(self, client: AsyncClient):
        tokens = (await _register(client)).json()["tokens"]
        response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
        assert response.status_code == 401

    async def test_me(self, client: AsyncClient, owner, owner_headers):
        response = await client.get("/api/auth/me", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["id"] == str(owner.id)
        assert response.json()["role"] == "owner"
