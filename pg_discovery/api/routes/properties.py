"""Owner console: PG CRUD, featured toggle and publish/draft switch."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import (
    get_admin_cache,
    get_db,
    get_managed_pg,
    invalidate_after_commit,
    require_owner,
)
from pg_discovery.models.property import Property
from pg_discovery.models.user import User
from pg_discovery.schemas.common import ApiResponse, ListResponse
from pg_discovery.schemas.property import (
    PropertyCreate,
    PropertyDetail,
    PropertySummary,
    PropertyUpdate,
    PublishRequest,
)
from pg_discovery.services.admin_cache import AdminDataCache
from pg_discovery.services.properties import list_managed_properties, unique_slug

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["properties"])


async def _save(db: AsyncSession, prop: Property) -> ApiResponse[PropertyDetail]:
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    return ApiResponse[PropertyDetail](data=PropertyDetail.from_property(prop))


@router.post(
    "/pgs",
    response_model=ApiResponse[PropertyDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Create a PG",
)
async def create_pg(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> ApiResponse[PropertyDetail]:
    """Create a PG owned by the current user. The slug is derived from the name."""
    prop = Property(
        owner_id=current_user.id,
        slug=await unique_slug(db, body.name),
        rooms=[],
        **body.model_dump(),
    )
    response = await _save(db, prop)
    logger.info("PG %s (%s) created by %s", prop.id, prop.slug, current_user.id)
    response.message = "PG created successfully"
    return response


@router.get(
    "/admin/pgs",
    response_model=ListResponse[PropertySummary],
    summary="List PGs managed by the current user",
)
async def list_my_pgs(
    published: bool | None = Query(None, description="true = live, false = drafts"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> ListResponse[PropertySummary]:
    items, total = await list_managed_properties(db, current_user, published=published, skip=skip, limit=limit)
    return ListResponse[PropertySummary](
        data=[PropertySummary.from_property(p) for p in items],
        total=total,
    )


@router.get("/pgs/{pg_id}", response_model=ApiResponse[PropertyDetail], summary="Get a PG with rooms and beds")
async def get_pg(prop: Property = Depends(get_managed_pg)) -> ApiResponse[PropertyDetail]:
    return ApiResponse[PropertyDetail](data=PropertyDetail.from_property(prop))


@router.put("/pgs/{pg_id}", response_model=ApiResponse[PropertyDetail], summary="Update a PG")
@router.patch("/pgs/{pg_id}", response_model=ApiResponse[PropertyDetail], summary="Update a PG")
async def update_pg(
    body: PropertyUpdate,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PropertyDetail]:
    """Partially update a PG. Only explicitly set fields are changed; a rename regenerates the slug."""
    update_data = body.model_dump(exclude_unset=True)

    new_name = update_data.get("name")
    if new_name is not None and new_name != prop.name:
        prop.slug = await unique_slug(db, new_name, exclude_id=prop.id)

    for field, value in update_data.items():
        setattr(prop, field, value)

    return await _save(db, prop)


@router.delete("/pgs/{pg_id}", response_model=ApiResponse[None], summary="Delete a PG")
async def delete_pg(
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[None]:
    """Delete a PG with its rooms, beds, guests and audits. Enquiries are kept."""
    pg_id = prop.id
    await db.delete(prop)
    await db.flush()
    invalidate_after_commit(db, cache, pg_id)
    logger.info("PG %s deleted", pg_id)
    return ApiResponse[None](message="PG deleted")


@router.post("/pgs/{pg_id}/featured", response_model=ApiResponse[PropertyDetail], summary="Toggle featured")
async def toggle_featured(
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PropertyDetail]:
    prop.is_featured = not prop.is_featured
    return await _save(db, prop)


@router.post("/pgs/{pg_id}/publish", response_model=ApiResponse[PropertyDetail], summary="Publish or unpublish")
async def set_published(
    body: PublishRequest,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PropertyDetail]:
    prop.is_published = body.is_published
    return await _save(db, prop)
