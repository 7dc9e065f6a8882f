"""Safety audits of a PG — fire, electrical, structural, health and security checks."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import get_admin_cache, get_db, get_managed_pg, invalidate_after_commit
from pg_discovery.database import utcnow
from pg_discovery.models.property import Property
from pg_discovery.models.safety_audit import SafetyAudit
from pg_discovery.schemas.common import ApiResponse, ListResponse
from pg_discovery.schemas.safety import (
    CATEGORY_PATTERN,
    SafetyAuditCreate,
    SafetyAuditResponse,
    SafetyAuditUpdate,
    SafetyStats,
)
from pg_discovery.services.admin_cache import AdminDataCache

router = APIRouter(prefix="/api/pgs/{pg_id}/safety-audits", tags=["safety"])


async def _get_audit(db: AsyncSession, prop: Property, audit_id: uuid.UUID) -> SafetyAudit:
    result = await db.execute(
        select(SafetyAudit).where(SafetyAudit.id == audit_id, SafetyAudit.property_id == prop.id)
    )
    audit = result.scalar_one_or_none()
    if audit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Safety audit not found")
    return audit


@router.get("", response_model=ListResponse[SafetyAuditResponse], summary="List audits (cached when unfiltered)")
async def list_audits(
    category: str | None = Query(None, pattern=CATEGORY_PATTERN),
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
):
    if category is None:
        cached = cache.get("safety_audits", prop.id)
        if cached is not None:
            return cached

    filters = [SafetyAudit.property_id == prop.id]
    if category is not None:
        filters.append(SafetyAudit.category == category)
    result = await db.execute(
        select(SafetyAudit).where(*filters).order_by(SafetyAudit.category, SafetyAudit.last_checked.desc())
    )
    items = list(result.scalars().all())
    payload = ListResponse[SafetyAuditResponse](
        data=[SafetyAuditResponse.model_validate(a) for a in items],
        total=len(items),
    ).model_dump(mode="json")

    if category is None:
        cache.set("safety_audits", prop.id, payload)
    return payload


@router.get("/stats", response_model=ApiResponse[SafetyStats], summary="Audit counts by status")
async def audit_stats(
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SafetyStats]:
    result = await db.execute(
        select(SafetyAudit.status, func.count())
        .where(SafetyAudit.property_id == prop.id)
        .group_by(SafetyAudit.status)
    )
    by_status = dict(result.all())
    return ApiResponse[SafetyStats](
        data=SafetyStats(
            total=sum(by_status.values()),
            compliant=by_status.get("compliant", 0),
            warning=by_status.get("warning", 0),
            critical=by_status.get("critical", 0),
        )
    )


@router.post(
    "",
    response_model=ApiResponse[SafetyAuditResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record an audit item",
)
async def create_audit(
    body: SafetyAuditCreate,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[SafetyAuditResponse]:
    audit = SafetyAudit(property_id=prop.id, **body.model_dump())
    db.add(audit)
    await db.flush()
    await db.refresh(audit)
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[SafetyAuditResponse](data=SafetyAuditResponse.model_validate(audit))


@router.patch("/{audit_id}", response_model=ApiResponse[SafetyAuditResponse], summary="Update an audit item")
@router.put("/{audit_id}", response_model=ApiResponse[SafetyAuditResponse], summary="Update an audit item")
async def update_audit(
    audit_id: uuid.UUID,
    body: SafetyAuditUpdate,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[SafetyAuditResponse]:
    audit = await _get_audit(db, prop, audit_id)
    update_data = body.model_dump(exclude_unset=True)
    if update_data.get("item", "") is None or update_data.get("status", "") is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="item and status cannot be empty")

    if "status" in update_data and update_data["status"] != audit.status:
        audit.last_checked = utcnow()
    for field, value in update_data.items():
        setattr(audit, field, value)

    db.add(audit)
    await db.flush()
    await db.refresh(audit)
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[SafetyAuditResponse](data=SafetyAuditResponse.model_validate(audit))


@router.delete("/{audit_id}", response_model=ApiResponse[None], summary="Delete an audit item")
async def delete_audit(
    audit_id: uuid.UUID,
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[None]:
    audit = await _get_audit(db, prop, audit_id)
    await db.delete(audit)
    await db.flush()
    invalidate_after_commit(db, cache, prop.id)
    return ApiResponse[None](message="Safety audit deleted")
