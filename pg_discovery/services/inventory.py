"""Rooms and beds of a property.

Mutations go through the parent collections (``prop.rooms``, ``room.beds``)
so the loaded aggregate stays consistent with the database, and every bed
change re-derives the room's capacity and availability.
"""

import logging
import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.exceptions import ConflictError, InvalidOperationError, NotFoundError
from pg_discovery.models.property import Property
from pg_discovery.models.room import Bed, Room
from pg_discovery.services.occupancy import sync_room_with_beds

logger = logging.getLogger(__name__)


async def room_number_taken(
    db: AsyncSession,
    pg_id: uuid.UUID,
    room_number: str,
    exclude_room_id: uuid.UUID | None = None,
) -> bool:
    """Case-insensitive room number collision check within one property."""
    query = select(func.count()).select_from(Room).where(
        Room.property_id == pg_id,
        func.lower(Room.room_number) == room_number.strip().lower(),
    )
    if exclude_room_id is not None:
        query = query.where(Room.id != exclude_room_id)
    return (await db.execute(query)).scalar_one() > 0


async def bed_number_taken(
    db: AsyncSession,
    room_id: uuid.UUID,
    bed_number: str,
    exclude_bed_id: uuid.UUID | None = None,
) -> bool:
    query = select(func.count()).select_from(Bed).where(
        Bed.room_id == room_id,
        func.lower(Bed.bed_number) == bed_number.strip().lower(),
    )
    if exclude_bed_id is not None:
        query = query.where(Bed.id != exclude_bed_id)
    return (await db.execute(query)).scalar_one() > 0


def find_room(prop: Property, room_id: uuid.UUID) -> Room:
    for room in prop.rooms:
        if room.id == room_id:
            return room
    raise NotFoundError("Room not found")


def find_bed(room: Room, bed_id: uuid.UUID) -> Bed:
    for bed in room.beds:
        if bed.id == bed_id:
            return bed
    raise NotFoundError("Bed not found")


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


async def add_room(db: AsyncSession, prop: Property, data: dict[str, Any]) -> Room:
    if await room_number_taken(db, prop.id, data["room_number"]):
        raise ConflictError(f"Room number '{data['room_number']}' already exists in this PG")

    room = Room(property_id=prop.id, beds=[], **data)
    prop.rooms.append(room)
    await db.flush()
    await db.refresh(room)
    logger.info("Room %s (%s) added to PG %s", room.id, room.room_number, prop.id)
    return room


async def update_room(db: AsyncSession, prop: Property, room: Room, data: dict[str, Any]) -> Room:
    """Apply a partial update. Availability of rooms with beds is derived, never set."""
    if room.beds and "is_available" in data:
        raise InvalidOperationError("Availability of a room with beds follows its beds; update the beds instead")

    new_number = data.get("room_number")
    if new_number is not None and await room_number_taken(db, prop.id, new_number, exclude_room_id=room.id):
        raise ConflictError(f"Room number '{new_number}' already exists in this PG")

    for field, value in data.items():
        setattr(room, field, value)
    # Capacity of a room with beds is its bed count.
    sync_room_with_beds(room)
    db.add(room)
    await db.flush()
    await db.refresh(room)
    return room


async def delete_room(db: AsyncSession, prop: Property, room: Room) -> None:
    prop.rooms.remove(room)
    await db.flush()
    logger.info("Room %s removed from PG %s", room.id, prop.id)


# ---------------------------------------------------------------------------
# Beds
# ---------------------------------------------------------------------------


async def _resync(db: AsyncSession, room: Room) -> None:
    sync_room_with_beds(room)
    await db.flush()
    await db.refresh(room)


async def add_bed(db: AsyncSession, room: Room, data: dict[str, Any]) -> Bed:
    if await bed_number_taken(db, room.id, data["bed_number"]):
        raise ConflictError(f"Bed number '{data['bed_number']}' already exists in this room")

    bed = Bed(room_id=room.id, **data)
    room.beds.append(bed)
    await db.flush()
    await _resync(db, room)
    return bed


async def update_bed(db: AsyncSession, room: Room, bed: Bed, data: dict[str, Any]) -> Bed:
    new_number = data.get("bed_number")
    if new_number is not None and await bed_number_taken(db, room.id, new_number, exclude_bed_id=bed.id):
        raise ConflictError(f"Bed number '{new_number}' already exists in this room")

    for field, value in data.items():
        setattr(bed, field, value)
    db.add(bed)
    await db.flush()
    await _resync(db, room)
    return bed


async def delete_bed(db: AsyncSession, room: Room, bed: Bed) -> None:
    room.beds.remove(bed)
    await db.flush()
    await _resync(db, room)
    logger.info("Bed %s removed from room %s", bed.id, room.id)
