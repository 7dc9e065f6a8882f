"""Tests for the public discovery endpoints."""

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from pg_discovery import database
from pg_discovery.database import get_db
from pg_discovery.main import app
from pg_discovery.services import discovery

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def listings(make_pg):
    await make_pg(
        name="Sunrise PG",
        city="Bengaluru",
        gender="FEMALE",
        featured=True,
        amenities=["WiFi", "Meals"],
        rooms=[("101", "9000", [False, True])],
    )
    await make_pg(
        name="Metro Stay",
        city="Pune",
        gender="MALE",
        locality="Hinjewadi",
        amenities=["WiFi", "Gym"],
        rooms=[("1", "6000", [False])],
    )
    await make_pg(name="Hidden Draft", city="Pune", published=False, rooms=[("1", "1000", [False])])


def _names(response) -> list[str]:
    return [pg["name"] for pg in response.json()["data"]]


class TestSearch:
    async def test_only_published_sorted_by_name(self, client: AsyncClient, listings) -> None:
        response = await client.get("/api/pgs")
        assert response.status_code == 200
        assert _names(response) == ["Metro Stay", "Sunrise PG"]
        assert response.json()["total"] == 2

    async def test_summary_includes_occupancy(self, client: AsyncClient, listings) -> None:
        response = await client.get("/api/pgs", params={"city": "bengaluru"})
        [pg] = response.json()["data"]
        assert pg["total_beds"] == 2
        assert pg["available_beds"] == 1
        assert pg["occupancy_rate"] == 50
        assert float(pg["starting_price"]) == 9000.0

    async def test_filters(self, client: AsyncClient, listings) -> None:
        assert _names(await client.get("/api/pgs", params={"gender": "male"})) == ["Metro Stay"]
        assert _names(await client.get("/api/pgs", params={"search": "hinje"})) == ["Metro Stay"]
        assert _names(await client.get("/api/pgs", params={"max_price": "7000"})) == ["Metro Stay"]
        assert _names(await client.get("/api/pgs", params={"amenities": "wifi,meals"})) == ["Sunrise PG"]
        assert _names(await client.get("/api/pgs", params=[("amenities", "wifi"), ("amenities", "gym")])) == [
            "Metro Stay"
        ]

    async def test_sort_and_paginate(self, client: AsyncClient, listings) -> None:
        response = await client.get("/api/pgs", params={"sort": "price_desc", "limit": 1})
        assert _names(response) == ["Sunrise PG"]
        assert response.json()["total"] == 2

        response = await client.get("/api/pgs", params={"sort": "price_desc", "skip": 1, "limit": 1})
        assert _names(response) == ["Metro Stay"]

    async def test_invalid_sort(self, client: AsyncClient) -> None:
        response = await client.get("/api/pgs", params={"sort": "random"})
        assert response.status_code == 400

    async def test_database_failure_degrades(self, client: AsyncClient, monkeypatch) -> None:
        async def broken(db, filters):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(discovery, "search_published", broken)
        response = await client.get("/api/pgs")
        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["data"] == []

    async def test_unreachable_database_degrades(self, client: AsyncClient, monkeypatch) -> None:
        # Real session dependency over an engine whose database file cannot be opened.
        unreachable = create_async_engine("sqlite+aiosqlite:////nonexistent-dir/pg_discovery.db")
        monkeypatch.setattr(
            database, "async_session_factory", async_sessionmaker(unreachable, expire_on_commit=False)
        )
        app.dependency_overrides.pop(get_db)
        try:
            response = await client.get("/api/pgs", params={"city": "Pune"})
        finally:
            await unreachable.dispose()

        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["data"] == []
        assert body["message"]


class TestOtherPublicEndpoints:
    async def test_featured(self, client: AsyncClient, listings) -> None:
        response = await client.get("/api/pgs/featured")
        assert _names(response) == ["Sunrise PG"]

    async def test_stats(self, client: AsyncClient, listings) -> None:
        response = await client.get("/api/pgs/stats")
        assert response.json()["data"] == {"total_count": 2, "featured_count": 1, "percentage": 50}

    async def test_cities(self, client: AsyncClient, listings) -> None:
        response = await client.get("/api/cities")
        assert response.json()["data"] == ["Bengaluru", "Pune"]

    async def test_by_slug(self, client: AsyncClient, make_pg) -> None:
        live = await make_pg(name="Live PG", rooms=[("1", "5000", [False])])
        response = await client.get(f"/api/pgs/by-slug/{live.slug}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Live PG"
        assert data["rooms"][0]["room_number"] == "1"

    async def test_by_slug_hides_drafts(self, client: AsyncClient, make_pg) -> None:
        draft = await make_pg(name="Draft PG", published=False)
        response = await client.get(f"/api/pgs/by-slug/{draft.slug}")
        assert response.status_code == 404
