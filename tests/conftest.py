"""Shared test configuration and fixtures.

Each test gets a fresh database: an in-memory SQLite database by default, or
the server named by ``TEST_DATABASE_URL`` (e.g. a throwaway PostgreSQL
database). Tables are created at the start of every test and the engine is
disposed afterwards, so tests never see each other's rows.

The admin cache and the enquiry rate limiter are process-wide singletons in
the app; here every test gets its own instances through dependency overrides.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import pg_discovery.models  # noqa: F401
from pg_discovery.api.deps import get_admin_cache, get_enquiry_rate_limiter
from pg_discovery.auth.jwt import create_token_pair
from pg_discovery.auth.passwords import hash_password
from pg_discovery.database import Base, get_db
from pg_discovery.main import app
from pg_discovery.models.property import Property
from pg_discovery.models.room import Bed, Room
from pg_discovery.models.user import User
from pg_discovery.services.admin_cache import AdminDataCache
from pg_discovery.services.rate_limit import EnquiryRateLimiter

_test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


def _make_engine():
    if _test_db_url.startswith("sqlite"):
        engine = create_async_engine(
            _test_db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        # SQLite only enforces ON DELETE actions with this pragma.
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_async_engine(_test_db_url, pool_pre_ping=True)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session bound to the per-test database."""
    session = AsyncSession(bind=test_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


# ---------------------------------------------------------------------------
# App wiring
# ---------------------------------------------------------------------------


@pytest.fixture
def admin_cache() -> AdminDataCache:
    return AdminDataCache(ttl_seconds=60)


@pytest.fixture
def rate_limiter() -> EnquiryRateLimiter:
    """Generous limit so ordinary tests never trip it."""
    return EnquiryRateLimiter(limit=1000, window_seconds=60)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    admin_cache: AdminDataCache,
    rate_limiter: EnquiryRateLimiter,
) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        # Commit like the real dependency so after-commit hooks run. Errors
        # skip the commit without a rollback, keeping fixture rows in place.
        yield db_session
        await db_session.commit()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_admin_cache] = lambda: admin_cache
    app.dependency_overrides[get_enquiry_rate_limiter] = lambda: rate_limiter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def _create_user(db: AsyncSession, role: str, name: str) -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role}-{unique}@test.com",
        hashed_password=hash_password("testpass123"),
        name=name,
        auth_provider="local",
        is_active=True,
        role=role,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def _headers(user: User) -> dict[str, str]:
    tokens = create_token_pair(str(user.id), role=user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "owner", "Ramesh Kumar")


@pytest_asyncio.fixture
async def other_owner(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "owner", "Sunita Rao")


@pytest_asyncio.fixture
async def visitor(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "visitor", "Arjun Mehta")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "admin", "Site Admin")


@pytest.fixture
def owner_headers(owner: User) -> dict[str, str]:
    return _headers(owner)


@pytest.fixture
def other_owner_headers(other_owner: User) -> dict[str, str]:
    return _headers(other_owner)


@pytest.fixture
def visitor_headers(visitor: User) -> dict[str, str]:
    return _headers(visitor)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return _headers(admin)


# ---------------------------------------------------------------------------
# PGs, rooms and beds
# ---------------------------------------------------------------------------


@pytest.fixture
def make_pg(db_session: AsyncSession, owner: User):
    """Factory that inserts a PG with rooms and beds directly in the DB.

    ``rooms`` is a list of ``(room_number, base_price, [bed occupied flags])``.
    """

    async def _make(
        name: str = "Sunrise PG",
        city: str = "Bengaluru",
        gender: str = "UNISEX",
        published: bool = True,
        featured: bool = False,
        amenities: list[str] | None = None,
        rooms: list[tuple[str, str, list[bool]]] | None = None,
        owner_user: User | None = None,
        **extra,
    ) -> Property:
        prop = Property(
            owner_id=(owner_user or owner).id,
            slug=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
            name=name,
            city=city,
            locality=extra.pop("locality", "Koramangala"),
            address=extra.pop("address", "5th Block"),
            gender=gender,
            is_published=published,
            is_featured=featured,
            amenities=amenities or [],
            rooms=[],
            **extra,
        )
        for number, price, beds in rooms or []:
            room = Room(room_number=number, base_price=Decimal(price), capacity=max(len(beds), 1), beds=[])
            for index, occupied in enumerate(beds, start=1):
                room.beds.append(Bed(bed_number=f"B{index}", is_occupied=occupied))
            room.is_available = not beds or not all(beds)
            prop.rooms.append(room)
        db_session.add(prop)
        await db_session.flush()
        await db_session.refresh(prop)
        return prop

    return _make


@pytest_asyncio.fixture
async def test_pg(make_pg) -> Property:
    """Published PG with two rooms: 101 (2 beds, one occupied) and 102 (1 free bed)."""
    return await make_pg(
        name="Sunrise PG",
        amenities=["WiFi", "Power Backup", "Laundry"],
        rooms=[("101", "8000.00", [True, False]), ("102", "12000.00", [False])],
        email="sunrise@pg.test",
        phone_number="9876543210",
    )
