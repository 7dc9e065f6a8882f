"""Discovery filter — narrows published PGs for the public search pages.

``filter_properties`` is a pure function of (properties, filters), so applying
the same filters twice yields the same listings. ``search_published`` loads
the candidate rows and delegates to it.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.models.property import Property
from pg_discovery.services.occupancy import OccupancySummary, compute_occupancy

logger = logging.getLogger(__name__)

DEFAULT_MIN_PRICE = Decimal("0")
DEFAULT_MAX_PRICE = Decimal("999999")
SORT_OPTIONS = ("name", "price_asc", "price_desc", "newest", "availability")


@dataclass(frozen=True)
class DiscoveryFilters:
    """Search parameters. Blank strings behave as if the filter was not given."""

    city: str | None = None
    gender: str | None = None
    search: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    amenities: tuple[str, ...] = field(default_factory=tuple)
    featured_only: bool = False
    sort: str = "name"


@dataclass(frozen=True)
class Listing:
    """A published property together with its derived occupancy figures."""

    pg: Any
    occupancy: OccupancySummary


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def matches_amenities(property_amenities: Iterable[str] | None, requested: Iterable[str]) -> bool:
    """True if every requested amenity is a case-insensitive substring of some property amenity."""
    available = [a.lower() for a in (property_amenities or []) if a]
    for wanted in requested:
        wanted = wanted.strip().lower()
        if not wanted:
            continue
        if not any(wanted in amenity for amenity in available):
            return False
    return True


def matches(pg: Any, occupancy: OccupancySummary, filters: DiscoveryFilters) -> bool:
    """Apply every filter to one property. Unpublished properties never match."""
    if not getattr(pg, "is_published", False):
        return False

    if filters.featured_only and not getattr(pg, "is_featured", False):
        return False

    city = _clean(filters.city)
    if city and (pg.city or "").strip().lower() != city.lower():
        return False

    gender = _clean(filters.gender)
    if gender and (pg.gender or "").upper() != gender.upper():
        return False

    search = _clean(filters.search)
    if search:
        needle = search.lower()
        haystack = (pg.name, pg.locality, pg.city, pg.address)
        if not any(needle in (value or "").lower() for value in haystack):
            return False

    min_price = filters.min_price if filters.min_price is not None else DEFAULT_MIN_PRICE
    max_price = filters.max_price if filters.max_price is not None else DEFAULT_MAX_PRICE
    if not min_price <= occupancy.starting_price <= max_price:
        return False

    return matches_amenities(getattr(pg, "amenities", None), filters.amenities)


def _sort_key(sort: str):
    if sort == "price_asc":
        return lambda item: (item.occupancy.starting_price, item.pg.name.lower())
    if sort == "price_desc":
        return lambda item: (-item.occupancy.starting_price, item.pg.name.lower())
    if sort == "availability":
        return lambda item: (-item.occupancy.available_beds, item.pg.name.lower())
    return lambda item: (item.pg.name.lower(), item.pg.name)


def filter_properties(properties: Iterable[Any], filters: DiscoveryFilters) -> list[Listing]:
    """Return matching listings in the requested order (name ascending by default)."""
    listings = []
    for pg in properties:
        occupancy = compute_occupancy(pg)
        if matches(pg, occupancy, filters):
            listings.append(Listing(pg=pg, occupancy=occupancy))

    if filters.sort == "newest":
        listings.sort(key=lambda item: item.pg.name.lower())
        listings.sort(key=lambda item: item.pg.created_at, reverse=True)
    else:
        listings.sort(key=_sort_key(filters.sort))
    return listings


async def search_published(db: AsyncSession, filters: DiscoveryFilters) -> list[Listing]:
    """Load published properties (narrowed in SQL where cheap) and filter them."""
    query = select(Property).where(Property.is_published.is_(True))

    city = _clean(filters.city)
    if city:
        query = query.where(func.lower(Property.city) == city.lower())
    gender = _clean(filters.gender)
    if gender:
        query = query.where(Property.gender == gender.upper())
    if filters.featured_only:
        query = query.where(Property.is_featured.is_(True))

    result = await db.execute(query.execution_options(populate_existing=True))
    return filter_properties(result.scalars().all(), filters)


async def get_published_by_slug(db: AsyncSession, slug: str) -> Property | None:
    result = await db.execute(
        select(Property)
        .where(Property.slug == slug, Property.is_published.is_(True))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_cities(db: AsyncSession) -> list[str]:
    """Distinct cities that have at least one published property, sorted."""
    result = await db.execute(
        select(Property.city).where(Property.is_published.is_(True)).distinct().order_by(Property.city)
    )
    return [city for city in result.scalars().all() if city]


async def listing_stats(db: AsyncSession) -> dict[str, int]:
    """Published/featured counts for the landing page."""
    total_result = await db.execute(
        select(func.count()).select_from(Property).where(Property.is_published.is_(True))
    )
    featured_result = await db.execute(
        select(func.count())
        .select_from(Property)
        .where(Property.is_published.is_(True), Property.is_featured.is_(True))
    )
    total = total_result.scalar_one()
    featured = featured_result.scalar_one()
    return {
        "total_count": total,
        "featured_count": featured,
        "percentage": round(featured * 100 / total) if total else 0,
    }


def paginate(listings: Sequence[Listing], skip: int, limit: int) -> list[Listing]:
    return list(listings[skip : skip + limit])
