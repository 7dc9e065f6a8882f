"""Live form checks for room and bed numbers."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import get_db, http_error, require_owner
from pg_discovery.exceptions import DomainError
from pg_discovery.models.user import User
from pg_discovery.schemas.common import ValidationResult
from pg_discovery.services import inventory
from pg_discovery.services.properties import get_managed_property

router = APIRouter(prefix="/api/validate", tags=["validation"])


def _result(label: str, value: str, taken: bool) -> ValidationResult:
    if not value.strip():
        return ValidationResult(valid=False, is_duplicate=False, message=f"{label} is required")
    if taken:
        return ValidationResult(valid=False, is_duplicate=True, message=f"{label} '{value}' is already in use")
    return ValidationResult(valid=True, is_duplicate=False, message=f"{label} is available")


@router.get("/room-number", response_model=ValidationResult)
async def validate_room_number(
    pg_id: uuid.UUID = Query(...),
    room_number: str = Query(...),
    exclude_room_id: uuid.UUID | None = Query(None, description="Room being edited"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> ValidationResult:
    try:
        await get_managed_property(db, pg_id, current_user)
    except DomainError as exc:
        raise http_error(exc) from None

    taken = bool(room_number.strip()) and await inventory.room_number_taken(
        db, pg_id, room_number, exclude_room_id=exclude_room_id
    )
    return _result("Room number", room_number, taken)


@router.get("/bed-number", response_model=ValidationResult)
async def validate_bed_number(
    pg_id: uuid.UUID = Query(...),
    room_id: uuid.UUID = Query(...),
    bed_number: str = Query(...),
    exclude_bed_id: uuid.UUID | None = Query(None, description="Bed being edited"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> ValidationResult:
    try:
        prop = await get_managed_property(db, pg_id, current_user)
        inventory.find_room(prop, room_id)
    except DomainError as exc:
        raise http_error(exc) from None

    taken = bool(bed_number.strip()) and await inventory.bed_number_taken(
        db, room_id, bed_number, exclude_bed_id=exclude_bed_id
    )
    return _result("Bed number", bed_number, taken)
