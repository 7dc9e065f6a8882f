"""Public discovery API — search, featured listings, detail by slug, cities, stats.

Only published PGs are ever returned. If the database cannot be reached the
search endpoints degrade to a 503 with an empty ``data`` list rather than an
unhandled error.
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import get_db
from pg_discovery.schemas.common import ApiResponse, ListResponse
from pg_discovery.schemas.property import ListingStats, PropertyDetail, PropertySummary
from pg_discovery.services import discovery
from pg_discovery.services.discovery import DiscoveryFilters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["discovery"])

CONNECTION_ISSUE = "We are having trouble reaching the listings right now. Please try again shortly."
SORT_PATTERN = "^(" + "|".join(discovery.SORT_OPTIONS) + ")$"


def _degraded() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": False, "message": CONNECTION_ISSUE, "data": []},
    )


def _split_amenities(values: list[str]) -> tuple[str, ...]:
    """Accept both repeated ``amenities=`` params and comma-separated lists."""
    return tuple(part.strip() for value in values for part in value.split(",") if part.strip())


@router.get(
    "/pgs",
    response_model=ListResponse[PropertySummary],
    summary="Search published PGs",
    responses={503: {"description": "Database unavailable; empty result"}},
)
async def search_pgs(
    city: str | None = Query(None),
    gender: str | None = Query(None, description="MALE, FEMALE or UNISEX (case-insensitive)"),
    search: str | None = Query(None, description="Matches name, locality, city or address"),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    amenities: list[str] = Query([]),
    featured_only: bool = Query(False),
    sort: str = Query("name", pattern=SORT_PATTERN),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    filters = DiscoveryFilters(
        city=city,
        gender=gender,
        search=search,
        min_price=min_price,
        max_price=max_price,
        amenities=_split_amenities(amenities),
        featured_only=featured_only,
        sort=sort,
    )
    try:
        listings = await discovery.search_published(db, filters)
    except (SQLAlchemyError, OSError):
        logger.exception("Discovery search failed")
        return _degraded()

    page = discovery.paginate(listings, skip, limit)
    return ListResponse[PropertySummary](
        data=[PropertySummary.from_property(listing.pg) for listing in page],
        total=len(listings),
    )


@router.get("/pgs/featured", response_model=ListResponse[PropertySummary], summary="Featured PGs")
async def featured_pgs(
    city: str | None = Query(None),
    limit: int = Query(6, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    try:
        listings = await discovery.search_published(db, DiscoveryFilters(city=city, featured_only=True))
    except (SQLAlchemyError, OSError):
        logger.exception("Featured listing query failed")
        return _degraded()

    return ListResponse[PropertySummary](
        data=[PropertySummary.from_property(listing.pg) for listing in listings[:limit]],
        total=len(listings),
    )


@router.get("/pgs/stats", response_model=ApiResponse[ListingStats], summary="Listing statistics")
async def pg_stats(db: AsyncSession = Depends(get_db)) -> ApiResponse[ListingStats]:
    stats = await discovery.listing_stats(db)
    return ApiResponse[ListingStats](data=ListingStats(**stats))


@router.get("/pgs/by-slug/{slug}", response_model=ApiResponse[PropertyDetail], summary="Published PG by slug")
async def pg_by_slug(slug: str, db: AsyncSession = Depends(get_db)) -> ApiResponse[PropertyDetail]:
    prop = await discovery.get_published_by_slug(db, slug)
    if prop is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="PG not found")
    return ApiResponse[PropertyDetail](data=PropertyDetail.from_property(prop))


@router.get("/cities", response_model=ApiResponse[list[str]], summary="Cities with published PGs")
async def cities(db: AsyncSession = Depends(get_db)):
    try:
        names = await discovery.list_cities(db)
    except (SQLAlchemyError, OSError):
        logger.exception("City listing failed")
        return _degraded()
    return ApiResponse[list[str]](data=names)
