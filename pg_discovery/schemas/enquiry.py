"""Pydantic v2 request/response schemas for enquiry endpoints.

Enquiry forms are public and loosely typed, so input is normalised before
validation: phone numbers lose their formatting, blank optional fields fall
back to their defaults and placeholder property ids become general enquiries.
"""

import re
import uuid
from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

PHONE_PATTERN = r"^[6-9]\d{9}$"
ENQUIRY_STATUS_PATTERN = "^(NEW|CONTACTED|CLOSED)$"
DEFAULT_OCCUPATION = "Student/Professional"
DEFAULT_ROOM_TYPE = "SINGLE"

# Ids sent by site-wide enquiry widgets that are not tied to a property.
PLACEHOLDER_PG_IDS = frozenset({"floating-drawer", "navbar-modal", "elite-hub", "general-inquiry"})


class EnquiryCreate(BaseModel):
    """Public enquiry submission."""

    pg_id: uuid.UUID | None = Field(None, validation_alias=AliasChoices("pg_id", "pgId"))
    name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    email: EmailStr | None = None
    occupation: str = Field(DEFAULT_OCCUPATION, max_length=255)
    room_type: str = Field(
        DEFAULT_ROOM_TYPE,
        max_length=50,
        validation_alias=AliasChoices("room_type", "room_sharing", "roomType", "roomSharing"),
    )
    move_in_date: date = Field(
        default_factory=date.today,
        validation_alias=AliasChoices("move_in_date", "moveInDate"),
    )
    message: str | None = Field(None, max_length=1000)

    @field_validator("pg_id", mode="before")
    @classmethod
    def _general_enquiry_ids(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            if not v or v in PLACEHOLDER_PG_IDS:
                return None
        return v

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("phone", mode="before")
    @classmethod
    def _digits_only(cls, v: object) -> object:
        if isinstance(v, int):
            v = str(v)
        return re.sub(r"\D", "", v) if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("occupation", mode="before")
    @classmethod
    def _default_occupation(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_OCCUPATION
        return v.strip() if isinstance(v, str) else v

    @field_validator("room_type", mode="before")
    @classmethod
    def _default_room_type(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_ROOM_TYPE
        return v.strip() if isinstance(v, str) else v

    @field_validator("move_in_date", mode="before")
    @classmethod
    def _coerce_move_in(cls, v: object) -> object:
        if v is None or v == "":
            return date.today()
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            # Browsers send full ISO timestamps; keep the calendar day.
            return v.split("T", 1)[0]
        return v

    @field_validator("message", mode="before")
    @classmethod
    def _blank_message(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class EnquiryStatusUpdate(BaseModel):
    status: str = Field(..., pattern=ENQUIRY_STATUS_PATTERN)

    @field_validator("status", mode="before")
    @classmethod
    def _upper(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v


class EnquiryCreated(BaseModel):
    success: bool = True
    enquiry_id: uuid.UUID
    message: str = "Enquiry submitted successfully"


class EnquiryResponse(BaseModel):
    id: uuid.UUID
    pg_id: uuid.UUID | None = Field(None, validation_alias=AliasChoices("pg_id", "property_id"))
    pg_name: str | None = None
    user_id: uuid.UUID | None = None
    name: str
    phone: str
    email: str | None = None
    occupation: str | None = None
    room_type: str | None = None
    move_in_date: date | None = None
    message: str | None = None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_enquiry(cls, enquiry: object) -> "EnquiryResponse":
        prop = getattr(enquiry, "property", None)
        return cls.model_validate(enquiry).model_copy(update={"pg_name": prop.name if prop is not None else None})


class EnquiryStats(BaseModel):
    total: int
    new: int
    contacted: int
    closed: int
    last_week: int
