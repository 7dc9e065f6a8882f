"""Pydantic v2 request/response schemas for guest endpoints."""

import uuid
from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, model_validator

GUEST_STATUS_PATTERN = "^(active|checked-out|upcoming)$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class GuestCreate(BaseModel):
    """Schema for checking a guest into a room."""

    room_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=15)
    check_in_date: date
    check_out_date: date | None = None
    status: str = Field("active", pattern=GUEST_STATUS_PATTERN)
    number_of_occupants: int = Field(1, ge=1)
    notes: str | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> "GuestCreate":
        if self.check_out_date is not None and self.check_out_date < self.check_in_date:
            raise ValueError("check_out_date must be on or after check_in_date")
        return self


class GuestUpdate(BaseModel):
    """Schema for partially updating a guest. All fields optional."""

    room_id: uuid.UUID | None = None
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=15)
    check_in_date: date | None = None
    check_out_date: date | None = None
    status: str | None = Field(None, pattern=GUEST_STATUS_PATTERN)
    number_of_occupants: int | None = Field(None, ge=1)
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class GuestResponse(BaseModel):
    """Guest as shown in the owner console."""

    id: uuid.UUID
    pg_id: uuid.UUID = Field(validation_alias=AliasChoices("pg_id", "property_id"))
    room_id: uuid.UUID
    room_number: str | None = None
    name: str
    email: str | None = None
    phone: str | None = None
    check_in_date: date
    check_out_date: date | None = None
    status: str
    number_of_occupants: int
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_guest(cls, guest: object) -> "GuestResponse":
        room = getattr(guest, "room", None)
        return cls.model_validate(guest).model_copy(
            update={"room_number": room.room_number if room is not None else None}
        )


class GuestStats(BaseModel):
    total: int
    active: int
    upcoming: int
    checked_out: int
