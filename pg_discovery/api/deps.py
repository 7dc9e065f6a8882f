"""Shared API dependencies — single import point for all routers.

Re-exports the database session and auth dependencies, provides the
process-wide admin cache and enquiry rate limiter (overridable in tests),
and maps domain exceptions onto HTTP errors::

    from pg_discovery.api.deps import get_db, require_owner
"""

import math
import uuid
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.auth.dependencies import (
    get_current_active_user,
    get_current_user,
    get_optional_user,
    require_admin,
    require_owner,
)
from pg_discovery.config import settings
from pg_discovery.database import get_db
from pg_discovery.exceptions import (
    ConflictError,
    DomainError,
    InvalidOperationError,
    NotFoundError,
    PermissionDeniedError,
    UpstreamServiceError,
)
from pg_discovery.models.property import Property
from pg_discovery.models.user import User
from pg_discovery.services.admin_cache import AdminDataCache, build_admin_cache
from pg_discovery.services.properties import get_managed_property
from pg_discovery.services.rate_limit import EnquiryRateLimiter

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_optional_user",
    "require_owner",
    "require_admin",
    "get_admin_cache",
    "get_enquiry_rate_limiter",
    "invalidate_after_commit",
    "get_managed_pg",
    "enforce_enquiry_rate_limit",
    "client_ip",
    "http_error",
]

_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidOperationError, status.HTTP_400_BAD_REQUEST),
    (UpstreamServiceError, status.HTTP_502_BAD_GATEWAY),
]


def http_error(exc: DomainError) -> HTTPException:
    """Translate a domain exception into an ``HTTPException`` carrying its code."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    return HTTPException(status_code=status_code, detail={"message": exc.message, "code": exc.code})


@lru_cache
def get_admin_cache() -> AdminDataCache:
    return build_admin_cache(settings.admin_cache_ttl_seconds, settings.admin_cache_file)


@lru_cache
def get_enquiry_rate_limiter() -> EnquiryRateLimiter:
    return EnquiryRateLimiter(
        limit=settings.enquiry_rate_limit,
        window_seconds=settings.enquiry_rate_limit_window_seconds,
    )


def invalidate_after_commit(
    db: AsyncSession,
    cache: AdminDataCache,
    pg_id: uuid.UUID,
    namespace: str | None = None,
) -> None:
    """Drop a property's cached lists once the request's transaction commits.

    Readers only re-populate the cache from committed rows. Nothing is dropped
    if the session never commits.
    """

    def _drop(_session) -> None:
        if namespace is None:
            cache.invalidate(pg_id)
        else:
            cache.clear(namespace, pg_id)

    event.listen(db.sync_session, "after_commit", _drop, once=True)


def client_ip(request: Request) -> str:
    """First ``X-Forwarded-For`` hop, then ``X-Real-IP``, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


async def get_managed_pg(
    pg_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_owner),
) -> Property:
    """The ``{pg_id}`` path property, loaded with rooms and beds, if the user may manage it."""
    try:
        return await get_managed_property(db, pg_id, user)
    except DomainError as exc:
        raise http_error(exc) from None


async def enforce_enquiry_rate_limit(
    request: Request,
    limiter: EnquiryRateLimiter = Depends(get_enquiry_rate_limiter),
) -> None:
    """429 with ``Retry-After`` once a client exceeds the enquiry submission limit."""
    retry_after = limiter.hit(client_ip(request))
    if retry_after is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"message": "Too many requests. Please try again later.", "code": "RATE_LIMITED"},
            headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
        )
