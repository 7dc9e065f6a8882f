"""Enquiry API — public submission plus the owner/admin inbox."""

import logging
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import (
    enforce_enquiry_rate_limit,
    get_admin_cache,
    get_current_active_user,
    get_db,
    get_managed_pg,
    get_optional_user,
    http_error,
    invalidate_after_commit,
    require_owner,
)
from pg_discovery.exceptions import DomainError
from pg_discovery.models.property import Property
from pg_discovery.models.user import User
from pg_discovery.schemas.common import ApiResponse, ListResponse
from pg_discovery.schemas.enquiry import (
    ENQUIRY_STATUS_PATTERN,
    EnquiryCreate,
    EnquiryCreated,
    EnquiryResponse,
    EnquiryStats,
    EnquiryStatusUpdate,
)
from pg_discovery.services import enquiries
from pg_discovery.services.admin_cache import AdminDataCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/enquiries", tags=["enquiries"])
pg_router = APIRouter(prefix="/api/pgs/{pg_id}/enquiries", tags=["enquiries"])


@router.post(
    "",
    response_model=EnquiryCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an enquiry",
    dependencies=[Depends(enforce_enquiry_rate_limit)],
)
async def submit_enquiry(
    body: EnquiryCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> EnquiryCreated:
    """Record a visitor enquiry for a PG, or a general enquiry without ``pg_id``.

    E-mails to the owner and the visitor are sent after the response; their
    failure never affects the stored enquiry.
    """
    try:
        enquiry = await enquiries.submit_enquiry(db, body, user=current_user)
    except DomainError as exc:
        raise http_error(exc) from None

    if enquiry.property_id is not None:
        invalidate_after_commit(db, cache, enquiry.property_id, namespace="enquiries")
    background_tasks.add_task(enquiries.send_enquiry_emails, enquiries.build_notice(enquiry))
    return EnquiryCreated(enquiry_id=enquiry.id)


@router.get("", response_model=ListResponse[EnquiryResponse], summary="List enquiries for my PGs")
async def list_enquiries(
    status_filter: str | None = Query(None, alias="status", pattern=ENQUIRY_STATUS_PATTERN),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> ListResponse[EnquiryResponse]:
    """Newest first. Admins also see general enquiries."""
    items, total = await enquiries.list_enquiries(db, current_user, status=status_filter, skip=skip, limit=limit)
    return ListResponse[EnquiryResponse](data=[EnquiryResponse.from_enquiry(e) for e in items], total=total)


@router.get("/stats", response_model=ApiResponse[EnquiryStats], summary="Enquiry counts by status")
async def enquiry_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> ApiResponse[EnquiryStats]:
    return ApiResponse[EnquiryStats](data=EnquiryStats(**await enquiries.enquiry_stats(db, current_user)))


@router.get("/mine", response_model=ListResponse[EnquiryResponse], summary="Enquiries I submitted")
async def my_enquiries(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ListResponse[EnquiryResponse]:
    items = await enquiries.list_for_visitor(db, current_user)
    return ListResponse[EnquiryResponse](data=[EnquiryResponse.from_enquiry(e) for e in items], total=len(items))


@router.get("/{enquiry_id}", response_model=ApiResponse[EnquiryResponse], summary="Get an enquiry")
async def get_enquiry(
    enquiry_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> ApiResponse[EnquiryResponse]:
    try:
        enquiry = await enquiries.get_enquiry(db, enquiry_id, current_user)
    except DomainError as exc:
        raise http_error(exc) from None
    return ApiResponse[EnquiryResponse](data=EnquiryResponse.from_enquiry(enquiry))


@router.patch("/{enquiry_id}", response_model=ApiResponse[EnquiryResponse], summary="Update enquiry status")
async def update_enquiry_status(
    enquiry_id: uuid.UUID,
    body: EnquiryStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
    cache: AdminDataCache = Depends(get_admin_cache),
) -> ApiResponse[EnquiryResponse]:
    try:
        enquiry = await enquiries.update_status(db, enquiry_id, current_user, body.status)
    except DomainError as exc:
        raise http_error(exc) from None

    if enquiry.property_id is not None:
        invalidate_after_commit(db, cache, enquiry.property_id, namespace="enquiries")
    return ApiResponse[EnquiryResponse](data=EnquiryResponse.from_enquiry(enquiry))


@pg_router.get("", response_model=ListResponse[EnquiryResponse], summary="Enquiries for one PG (cached)")
async def list_pg_enquiries(
    prop: Property = Depends(get_managed_pg),
    db: AsyncSession = Depends(get_db),
    cache: AdminDataCache = Depends(get_admin_cache),
):
    cached = cache.get("enquiries", prop.id)
    if cached is not None:
        return cached

    items = await enquiries.list_for_property(db, prop.id)
    payload = ListResponse[EnquiryResponse](
        data=[EnquiryResponse.from_enquiry(e) for e in items],
        total=len(items),
    ).model_dump(mode="json")
    cache.set("enquiries", prop.id, payload)
    return payload
