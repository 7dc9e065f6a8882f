"""Tests for auth dependencies — token edge cases and role checks."""

import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient

from pg_discovery.auth.jwt import create_access_token, create_token_pair
from pg_discovery.models.user import User

pytestmark = pytest.mark.asyncio


class TestGetCurrentUser:
    """Exercised through the /me endpoint."""

    async def test_missing_header(self, client: AsyncClient):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_expired_token_rejected(self, client: AsyncClient, visitor: User):
        token = create_access_token({"sub": str(visitor.id)}, expires_delta=timedelta(seconds=-1))
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_invalid_token_format(self, client: AsyncClient):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.valid.jwt"})
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_refresh_token_type_rejected(self, client: AsyncClient, visitor: User):
        tokens = create_token_pair(str(visitor.id))
        response = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
        )
        assert response.status_code == 401

    async def test_nonexistent_user_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": str(uuid.uuid4())})
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_inactive_user_rejected(self, client: AsyncClient, db_session, visitor: User, visitor_headers):
        visitor.is_active = False
        await db_session.flush()
        response = await client.get("/api/auth/me", headers=visitor_headers)
        assert response.status_code == 401


class TestRoles:
    async def test_visitor_cannot_open_owner_console(self, client: AsyncClient, visitor_headers):
        response = await client.get("/api/admin/pgs", headers=visitor_headers)
        assert response.status_code == 403

    async def test_owner_can_open_owner_console(self, client: AsyncClient, owner_headers):
        response = await client.get("/api/admin/pgs", headers=owner_headers)
        assert response.status_code == 200

    async def test_owner_cannot_manage_users(self, client: AsyncClient, owner_headers):
        response = await client.get("/api/admin/users", headers=owner_headers)
        assert response.status_code == 403

    async def test_admin_can_manage_users(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/admin/users", headers=admin_headers)
        assert response.status_code == 200
