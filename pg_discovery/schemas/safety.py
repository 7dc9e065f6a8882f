"""Pydantic v2 request/response schemas for safety audit endpoints."""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

CATEGORY_PATTERN = "^(Fire Safety|Electrical|Structural|Health|Security)$"
AUDIT_STATUS_PATTERN = "^(compliant|warning|critical)$"


class SafetyAuditCreate(BaseModel):
    category: str = Field(..., pattern=CATEGORY_PATTERN)
    item: str = Field(..., min_length=1)
    status: str = Field(..., pattern=AUDIT_STATUS_PATTERN)
    notes: str | None = None
    inspected_by: str | None = Field(None, max_length=255)


class SafetyAuditUpdate(BaseModel):
    """Partial update; changing ``status`` refreshes ``last_checked``."""

    item: str | None = Field(None, min_length=1)
    status: str | None = Field(None, pattern=AUDIT_STATUS_PATTERN)
    notes: str | None = None
    inspected_by: str | None = Field(None, max_length=255)


class SafetyAuditResponse(BaseModel):
    id: uuid.UUID
    pg_id: uuid.UUID = Field(validation_alias=AliasChoices("pg_id", "property_id"))
    category: str
    item: str
    status: str
    notes: str | None = None
    inspected_by: str | None = None
    last_checked: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SafetyStats(BaseModel):
    total: int
    compliant: int
    warning: int
    critical: int
