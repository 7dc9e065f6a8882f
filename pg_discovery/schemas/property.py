"""Pydantic v2 request/response schemas for property (PG) endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

from pg_discovery.schemas.room import RoomResponse
from pg_discovery.services.occupancy import compute_occupancy

GENDER_PATTERN = "^(MALE|FEMALE|UNISEX)$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
PHONE_PATTERN = r"^\+?\d{10,14}$"


def _upper(value: object) -> object:
    return value.strip().upper() if isinstance(value, str) else value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


Gender = Annotated[str, BeforeValidator(_upper)]
OptionalEmail = Annotated[EmailStr | None, BeforeValidator(_blank_to_none)]

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for creating a new PG. Properties start as drafts unless published."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    full_address: str | None = None
    address: str = ""
    city: str = Field(..., min_length=1, max_length=100)
    locality: str = Field("", max_length=255)
    lat: float | None = Field(None, ge=-90, le=90)
    lng: float | None = Field(None, ge=-180, le=180)
    gender: Gender = Field("UNISEX", pattern=GENDER_PATTERN)
    is_published: bool = False
    is_featured: bool = False
    images: list[str] = Field(default_factory=list)
    thumbnail_image: str | None = None
    amenities: list[str] = Field(default_factory=list)
    rules_and_regulations: str | None = None
    check_in_time: str | None = Field(None, pattern=TIME_PATTERN)
    check_out_time: str | None = Field(None, pattern=TIME_PATTERN)
    min_stay_days: int = Field(1, ge=1)
    cancellation_policy: str | None = None
    manager_name: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(None, pattern=PHONE_PATTERN)
    whatsapp_number: str | None = Field(None, pattern=PHONE_PATTERN)
    email: OptionalEmail = None
    website: str | None = Field(None, max_length=500)


class PropertyUpdate(BaseModel):
    """Schema for partially updating a PG. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    full_address: str | None = None
    address: str | None = None
    city: str | None = Field(None, min_length=1, max_length=100)
    locality: str | None = Field(None, max_length=255)
    lat: float | None = Field(None, ge=-90, le=90)
    lng: float | None = Field(None, ge=-180, le=180)
    gender: Gender | None = Field(None, pattern=GENDER_PATTERN)
    is_published: bool | None = None
    is_featured: bool | None = None
    images: list[str] | None = None
    thumbnail_image: str | None = None
    amenities: list[str] | None = None
    rules_and_regulations: str | None = None
    check_in_time: str | None = Field(None, pattern=TIME_PATTERN)
    check_out_time: str | None = Field(None, pattern=TIME_PATTERN)
    min_stay_days: int | None = Field(None, ge=1)
    cancellation_policy: str | None = None
    manager_name: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(None, pattern=PHONE_PATTERN)
    whatsapp_number: str | None = Field(None, pattern=PHONE_PATTERN)
    email: OptionalEmail = None
    website: str | None = Field(None, max_length=500)


class PublishRequest(BaseModel):
    is_published: bool


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertySummary(BaseModel):
    """Listing card: core fields plus derived occupancy figures."""

    id: uuid.UUID
    slug: str
    name: str
    city: str
    locality: str
    address: str
    gender: str
    is_published: bool
    is_featured: bool
    thumbnail_image: str | None = None
    images: list[str] = []
    amenities: list[str] = []
    total_beds: int = 0
    available_beds: int = 0
    starting_price: Decimal = Decimal("0")
    occupancy_rate: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_property(cls, prop: object) -> "PropertySummary":
        return cls.model_validate(prop).model_copy(update=compute_occupancy(prop).as_dict())


class PropertyDetail(PropertySummary):
    """Full property including contact details, policies, rooms and beds."""

    owner_id: uuid.UUID
    description: str
    full_address: str | None = None
    lat: float | None = None
    lng: float | None = None
    rules_and_regulations: str | None = None
    check_in_time: str | None = None
    check_out_time: str | None = None
    min_stay_days: int
    cancellation_policy: str | None = None
    manager_name: str | None = None
    phone_number: str | None = None
    whatsapp_number: str | None = None
    email: str | None = None
    website: str | None = None
    rooms: list[RoomResponse] = []

    @classmethod
    def from_property(cls, prop: object) -> "PropertyDetail":
        detail = super().from_property(prop)
        return detail.model_copy(update={"rooms": [RoomResponse.from_room(room) for room in prop.rooms]})


class ListingStats(BaseModel):
    total_count: int
    featured_count: int
    percentage: int
