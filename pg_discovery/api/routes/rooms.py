"""Owner console: rooms of a PG and the beds inside them.

Bed changes re-derive the parent room's capacity and availability, and every
mutation drops the PG's admin cache entry.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import get_admin_cache, get_db, get_managed_pg, http_error, invalidate_after_commit
from pg_discovery.exceptions import DomainError
from pg_discovery.models.property import Property
from pg_discovery.models.room import Room
from pg_discovery.schemas.common import ApiResponse, ListResponse
from pg_discovery.schemas.room import (
    BedCreate,
    BedPatch,
    BedReplace,
    BedResponse,
    RoomCreate,
    RoomResponse,
    RoomUpdate,
)
from pg_discovery.services import inventory
from pg_discovery.services.admin_cache import AdminDataCache

router = APIRouter(prefix="/api/pgs/{pg_id}/rooms", tags=["rooms"])


def _room(prop: Property, room_id: uuid.UUID) -> Room:
    try:
        return inventory.find_room(prop, room_id)
    except DomainError as exc:
        raise http_error(exc) from None


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


@router.get("", response_model=ListResponse[RoomResponse], summary="List rooms (cached)")
async def list_rooms(
    prop: Property = Depends(get_managed_pg),
    cache: AdminDataCache = Depends(get_admin_cache),
):
    cached = cache.get("rooms", prop.id)
    if cached is not None:
        return cached

    payload = ListResponse[RoomResponse](
        data=[RoomResponse.from_room(room) for room in prop.rooms],
        total=len(prop.rooms),
    ).model_dump(mode="json")
    cache.set("rooms", prop.id, payload)
    return payload


@router.post(
    "",
    response_model=ApiResponse[RoomResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a room",
)
async def create_room(
    body: RoomCreate,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[RoomResponse]:
    try:
        room = await inventory.add_room(db, prop, body.model_dump())
    except DomainError as exc:
        raise http_error(exc) from None
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[RoomResponse](data=RoomResponse.from_room(room), message="Room created successfully")


@router.get("/{room_id}", response_model=ApiResponse[RoomResponse], summary="Get a room with its beds")
async def get_room(room_id: uuid.UUID, prop: Property = Depends(get_managed_pg)) -> ApiResponse[RoomResponse]:
    return ApiResponse[RoomResponse](data=RoomResponse.from_room(_room(prop, room_id)))


@router.put("/{room_id}", response_model=ApiResponse[RoomResponse], summary="Update a room")
@router.patch("/{room_id}", response_model=ApiResponse[RoomResponse], summary="Update a room")
async def update_room(
    room_id: uuid.UUID,
    body: RoomUpdate,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[RoomResponse]:
    room = _room(prop, room_id)
    try:
        room = await inventory.update_room(db, prop, room, body.model_dump(exclude_unset=True))
    except DomainError as exc:
        raise http_error(exc) from None
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[RoomResponse](data=RoomResponse.from_room(room))


@router.delete("/{room_id}", response_model=ApiResponse[None], summary="Delete a room and its beds")
async def delete_room(
    room_id: uuid.UUID,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[None]:
    await inventory.delete_room(db, prop, _room(prop, room_id))
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[None](message="Room deleted")


# ---------------------------------------------------------------------------
# Beds
# ---------------------------------------------------------------------------


@router.get("/{room_id}/beds", response_model=ListResponse[BedResponse], summary="List beds of a room")
async def list_beds(room_id: uuid.UUID, prop: Property = Depends(get_managed_pg)) -> ListResponse[BedResponse]:
    room = _room(prop, room_id)
    return ListResponse[BedResponse](
        data=[BedResponse.model_validate(bed) for bed in room.beds],
        total=len(room.beds),
    )


@router.post(
    "/{room_id}/beds",
    response_model=ApiResponse[BedResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a bed",
)
async def create_bed(
    room_id: uuid.UUID,
    body: BedCreate,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[BedResponse]:
    room = _room(prop, room_id)
    try:
        bed = await inventory.add_bed(db, room, body.model_dump())
    except DomainError as exc:
        raise http_error(exc) from None
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[BedResponse](data=BedResponse.model_validate(bed), message="Bed created successfully")


@router.get("/{room_id}/beds/{bed_id}", response_model=ApiResponse[BedResponse], summary="Get a bed")
async def get_bed(
    room_id: uuid.UUID,
    bed_id: uuid.UUID,
    prop: Property = Depends(get_managed_pg),
) -> ApiResponse[BedResponse]:
    try:
        bed = inventory.find_bed(_room(prop, room_id), bed_id)
    except DomainError as exc:
        raise http_error(exc) from None
    return ApiResponse[BedResponse](data=BedResponse.model_validate(bed))


async def _update_bed(
    db: AsyncSession,
    cache: AdminDataCache,
    prop: Property,
    room_id: uuid.UUID,
    bed_id: uuid.UUID,
    data: dict,
) -> ApiResponse[BedResponse]:
    room = _room(prop, room_id)
    try:
        bed = inventory.find_bed(room, bed_id)
        bed = await inventory.update_bed(db, room, bed, data)
    except DomainError as exc:
        raise http_error(exc) from None
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[BedResponse](data=BedResponse.model_validate(bed))


@router.patch("/{room_id}/beds/{bed_id}", response_model=ApiResponse[BedResponse], summary="Partially update a bed")
async def patch_bed(
    room_id: uuid.UUID,
    bed_id: uuid.UUID,
    body: BedPatch,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[BedResponse]:
    """Typically used to flip ``is_occupied`` from the bed manager."""
    return await _update_bed(db, cache, prop, room_id, bed_id, body.model_dump(exclude_unset=True))


@router.put("/{room_id}/beds/{bed_id}", response_model=ApiResponse[BedResponse], summary="Replace a bed")
async def replace_bed(
    room_id: uuid.UUID,
    bed_id: uuid.UUID,
    body: BedReplace,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[BedResponse]:
    return await _update_bed(db, cache, prop, room_id, bed_id, body.model_dump())


@router.delete("/{room_id}/beds/{bed_id}", response_model=ApiResponse[None], summary="Delete a bed")
async def delete_bed(
    room_id: uuid.UUID,
    bed_id: uuid.UUID,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[None]:
    room = _room(prop, room_id)
    try:
        bed = inventory.find_bed(room, bed_id)
    except DomainError as exc:
        raise http_error(exc) from None
    await inventory.delete_bed(db, room, bed)
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[None](message="Bed deleted")
