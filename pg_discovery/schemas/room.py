"""Pydantic v2 request/response schemas for room and bed endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from pg_discovery.services.occupancy import room_bed_counts, room_type_for_bed_count

ROOM_TYPE_PATTERN = "^(SINGLE|DOUBLE|TRIPLE|OTHER)$"


def _upper(value: object) -> object:
    return value.strip().upper() if isinstance(value, str) else value


def _strip(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


Stripped = Annotated[str, BeforeValidator(_strip)]
Upper = Annotated[str, BeforeValidator(_upper)]


# ---------------------------------------------------------------------------
# Beds
# ---------------------------------------------------------------------------


class BedCreate(BaseModel):
    bed_number: Stripped = Field(..., min_length=1, max_length=50)
    is_occupied: bool = False


class BedPatch(BaseModel):
    """Partial bed update. Only explicitly set fields are changed."""

    bed_number: Stripped | None = Field(None, min_length=1, max_length=50)
    is_occupied: bool | None = None


class BedReplace(BedCreate):
    """Full bed update (PUT): every field is required."""

    is_occupied: bool


class BedResponse(BaseModel):
    id: uuid.UUID
    room_id: uuid.UUID
    bed_number: str
    is_occupied: bool

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


class RoomCreate(BaseModel):
    room_number: Stripped = Field(..., min_length=1, max_length=50)
    type: Upper = Field("SINGLE", pattern=ROOM_TYPE_PATTERN)
    base_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    deposit: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    notice_period: str | None = Field("1 Month", max_length=50)
    capacity: int = Field(1, ge=1, le=20)
    is_available: bool = True
    room_images: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)


class RoomUpdate(BaseModel):
    """Partial room update. ``is_available`` is only accepted for rooms without beds."""

    room_number: Stripped | None = Field(None, min_length=1, max_length=50)
    type: Upper | None = Field(None, pattern=ROOM_TYPE_PATTERN)
    base_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    deposit: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    notice_period: str | None = Field(None, max_length=50)
    capacity: int | None = Field(None, ge=1, le=20)
    is_available: bool | None = None
    room_images: list[str] | None = None
    amenities: list[str] | None = None


class RoomResponse(BaseModel):
    id: uuid.UUID
    pg_id: uuid.UUID = Field(validation_alias=AliasChoices("pg_id", "property_id"))
    room_number: str
    type: str
    base_price: Decimal
    deposit: Decimal | None = None
    notice_period: str | None = None
    capacity: int
    is_available: bool
    room_images: list[str] = []
    amenities: list[str] = []
    beds: list[BedResponse] = []
    total_beds: int = 0
    available_beds: int = 0
    suggested_type: str = "OTHER"
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_room(cls, room: object) -> "RoomResponse":
        total, available = room_bed_counts(room)
        return cls.model_validate(room).model_copy(
            update={
                "total_beds": total,
                "available_beds": available,
                "suggested_type": room_type_for_bed_count(total),
            }
        )
