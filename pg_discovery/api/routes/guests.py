"""Guests CRUD API router.

Guests belong to a PG and occupy one of its rooms. Only the PG's owner (or an
admin) can see and manage them.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import get_admin_cache, get_db, get_managed_pg, invalidate_after_commit
from pg_discovery.models.guest import Guest
from pg_discovery.models.property import Property
from pg_discovery.schemas.common import ApiResponse, ListResponse
from pg_discovery.schemas.guest import GuestCreate, GuestResponse, GuestStats, GuestUpdate
from pg_discovery.services.admin_cache import AdminDataCache

router = APIRouter(prefix="/api/pgs/{pg_id}/guests", tags=["guests"])

_REQUIRED_FIELDS = ("room_id", "name", "check_in_date", "status", "number_of_occupants")


def _ensure_room_in_pg(prop: Property, room_id: uuid.UUID) -> None:
    if not any(room.id == room_id for room in prop.rooms):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Room does not belong to this PG",
        )


async def _get_guest(db: AsyncSession, prop: Property, guest_id: uuid.UUID) -> Guest:
    result = await db.execute(select(Guest).where(Guest.id == guest_id, Guest.property_id == prop.id))
    guest = result.scalar_one_or_none()
    if guest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    return guest


@router.get("", response_model=ListResponse[GuestResponse], summary="List guests (cached when unfiltered)")
async def list_guests(
    search: str | None = Query(None, description="Search by name, email or phone (case-insensitive)"),
    status_filter: str | None = Query(None, alias="status", pattern="^(active|checked-out|upcoming)$"),
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
):
    """Guests of a PG, most recent check-in first."""
    unfiltered = not search and status_filter is None
    if unfiltered:
        cached = cache.get("guests", prop.id)
        if cached is not None:
            return cached

    filters = [Guest.property_id == prop.id]
    if search:
        pattern = f"%{search}%"
        filters.append(or_(Guest.name.ilike(pattern), Guest.email.ilike(pattern), Guest.phone.ilike(pattern)))
    if status_filter is not None:
        filters.append(Guest.status == status_filter)

    result = await db.execute(
        select(Guest).where(*filters).order_by(Guest.check_in_date.desc(), Guest.created_at.desc())
    )
    items = list(result.scalars().all())
    payload = ListResponse[GuestResponse](
        data=[GuestResponse.from_guest(g) for g in items],
        total=len(items),
    ).model_dump(mode="json")

    if unfiltered:
        cache.set("guests", prop.id, payload)
    return payload


@router.get("/stats", response_model=ApiResponse[GuestStats], summary="Guest counts by status")
async def guest_stats(
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[GuestStats]:
    result = await db.execute(
        select(Guest.status, func.count()).where(Guest.property_id == prop.id).group_by(Guest.status)
    )
    by_status = dict(result.all())
    return ApiResponse[GuestStats](
        data=GuestStats(
            total=sum(by_status.values()),
            active=by_status.get("active", 0),
            upcoming=by_status.get("upcoming", 0),
            checked_out=by_status.get("checked-out", 0),
        )
    )


@router.post(
    "",
    response_model=ApiResponse[GuestResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a guest",
)
async def create_guest(
    body: GuestCreate,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[GuestResponse]:
    _ensure_room_in_pg(prop, body.room_id)

    guest = Guest(property_id=prop.id, **body.model_dump())
    db.add(guest)
    await db.flush()
    await db.refresh(guest)
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[GuestResponse](data=GuestResponse.from_guest(guest), message="Guest added")


@router.get("/{guest_id}", response_model=ApiResponse[GuestResponse], summary="Get a guest")
async def get_guest(
    guest_id: uuid.UUID,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[GuestResponse]:
    guest = await _get_guest(db, prop, guest_id)
    return ApiResponse[GuestResponse](data=GuestResponse.from_guest(guest))


@router.put("/{guest_id}", response_model=ApiResponse[GuestResponse], summary="Update a guest")
@router.patch("/{guest_id}", response_model=ApiResponse[GuestResponse], summary="Update a guest")
async def update_guest(
    guest_id: uuid.UUID,
    body: GuestUpdate,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[GuestResponse]:
    """Partially update a guest. Only explicitly provided fields are changed."""
    guest = await _get_guest(db, prop, guest_id)
    update_data = body.model_dump(exclude_unset=True)

    cleared = sorted(field for field in _REQUIRED_FIELDS if field in update_data and update_data[field] is None)
    if cleared:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"These fields cannot be empty: {', '.join(cleared)}",
        )
    if "room_id" in update_data:
        _ensure_room_in_pg(prop, update_data["room_id"])

    check_in = update_data.get("check_in_date", guest.check_in_date)
    check_out = update_data.get("check_out_date", guest.check_out_date)
    if check_out is not None and check_out < check_in:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="check_out_date must be on or after check_in_date",
        )

    for field, value in update_data.items():
        setattr(guest, field, value)

    db.add(guest)
    await db.flush()
    await db.refresh(guest)
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[GuestResponse](data=GuestResponse.from_guest(guest))


@router.delete("/{guest_id}", response_model=ApiResponse[None], summary="Delete a guest")
async def delete_guest(
    guest_id: uuid.UUID,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[None]:
    guest = await _get_guest(db, prop, guest_id)
    await db.delete(guest)
    await db.flush()
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[None](message="Guest deleted")
