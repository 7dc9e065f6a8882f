"""Property service — slugs, ownership checks and owner-scoped listing."""

import logging
import uuid

from slugify import slugify as _slugify
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.exceptions import NotFoundError, PermissionDeniedError
from pg_discovery.models.property import Property
from pg_discovery.models.user import User

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    """Lower-case, ASCII-only, hyphen-separated slug ("Sunrise PG, Koramangala" → "sunrise-pg-koramangala")."""
    return _slugify(value, max_length=200, word_boundary=True) or "pg"


async def unique_slug(db: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> str:
    """Slug for ``name`` that no other property uses, suffixed -1, -2... on collision."""
    base = slugify(name)
    query = select(Property.slug).where(
        (Property.slug == base) | Property.slug.like(f"{base}-%")
    )
    if exclude_id is not None:
        query = query.where(Property.id != exclude_id)
    taken = set((await db.execute(query)).scalars().all())

    if base not in taken:
        return base
    suffix = 1
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


async def load_property(db: AsyncSession, pg_id: uuid.UUID) -> Property:
    """Fetch a property with fresh rooms and beds, or raise ``NotFoundError``."""
    result = await db.execute(
        select(Property).where(Property.id == pg_id).execution_options(populate_existing=True)
    )
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFoundError("PG not found")
    return prop


def ensure_can_manage(prop: Property, user: User) -> None:
    """Owners may only manage their own properties; admins may manage any."""
    if user.is_admin:
        return
    if prop.owner_id != user.id:
        logger.warning("User %s denied access to property %s", user.id, prop.id)
        raise PermissionDeniedError("You do not have access to this PG")


async def get_managed_property(db: AsyncSession, pg_id: uuid.UUID, user: User) -> Property:
    prop = await load_property(db, pg_id)
    ensure_can_manage(prop, user)
    return prop


async def list_managed_properties(
    db: AsyncSession,
    user: User,
    published: bool | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Property], int]:
    """Owner's properties (all properties for admins), newest first."""
    filters = []
    if not user.is_admin:
        filters.append(Property.owner_id == user.id)
    if published is not None:
        filters.append(Property.is_published.is_(published))

    total_result = await db.execute(select(func.count()).select_from(Property).where(*filters))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Property)
        .where(*filters)
        .order_by(Property.created_at.desc(), Property.name)
        .offset(skip)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all()), total
