"""Tests for slug generation and ownership checks."""

import uuid

import pytest

from pg_discovery.exceptions import NotFoundError, PermissionDeniedError
from pg_discovery.services.properties import (
    get_managed_property,
    list_managed_properties,
    slugify,
    unique_slug,
)

pytestmark = pytest.mark.asyncio


class TestSlugify:
    async def test_basic(self):
        assert slugify("Sunrise PG, Koramangala") == "sunrise-pg-koramangala"

    async def test_accents_and_symbols(self):
        assert slugify("  Café   Nest & Co.  ") == "cafe-nest-co"

    async def test_fallback(self):
        assert slugify("!!!") == "pg"

    async def test_transliterates_non_latin(self):
        assert slugify("Śrī Sai Residency") == "sri-sai-residency"

    async def test_drops_apostrophes(self):
        assert slugify("Sunita's PG") == "sunitas-pg"

    async def test_long_names_cut_at_word_boundary(self):
        slug = slugify("Comfort " * 60)
        assert len(slug) <= 200
        assert slug.endswith("comfort")


class TestUniqueSlug:
    async def test_free_slug(self, db_session):
        assert await unique_slug(db_session, "Green Nest") == "green-nest"

    async def test_suffixes_on_collision(self, db_session, make_pg):
        first = await make_pg(name="Green Nest")
        first.slug = "green-nest"
        await db_session.flush()
        assert await unique_slug(db_session, "Green Nest") == "green-nest-1"

        second = await make_pg(name="Another")
        second.slug = "green-nest-1"
        await db_session.flush()
        assert await unique_slug(db_session, "Green Nest") == "green-nest-2"

    async def test_excludes_self(self, db_session, make_pg):
        prop = await make_pg(name="Green Nest")
        prop.slug = "green-nest"
        await db_session.flush()
        assert await unique_slug(db_session, "Green Nest", exclude_id=prop.id) == "green-nest"


class TestManagedProperty:
    async def test_owner_allowed(self, db_session, test_pg, owner):
        assert (await get_managed_property(db_session, test_pg.id, owner)).id == test_pg.id

    async def test_other_owner_denied(self, db_session, test_pg, other_owner):
        with pytest.raises(PermissionDeniedError):
            await get_managed_property(db_session, test_pg.id, other_owner)

    async def test_admin_allowed(self, db_session, test_pg, admin):
        assert (await get_managed_property(db_session, test_pg.id, admin)).id == test_pg.id

    async def test_missing(self, db_session, owner):
        with pytest.raises(NotFoundError):
            await get_managed_property(db_session, uuid.uuid4(), owner)

    async def test_list_scoped_to_owner(self, db_session, make_pg, owner, other_owner, admin):
        await make_pg(name="Mine")
        await make_pg(name="Mine Draft", published=False)
        await make_pg(name="Theirs", owner_user=other_owner)

        items, total = await list_managed_properties(db_session, owner)
        assert total == 2
        assert {p.name for p in items} == {"Mine", "Mine Draft"}

        drafts, total = await list_managed_properties(db_session, owner, published=False)
        assert total == 1
        assert drafts[0].name == "Mine Draft"

        _, total = await list_managed_properties(db_session, admin)
        assert total == 3
