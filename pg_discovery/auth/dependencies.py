"""FastAPI authentication and role dependencies."""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.auth.jwt import ACCESS, decode_token
from pg_discovery.database import get_db
from pg_discovery.models.user import User

# Missing credentials are reported as 401 by the dependencies below.
_bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _user_from_token(token: str, db: AsyncSession) -> User | None:
    """Resolve an access token to an active user, or ``None``."""
    try:
        payload = decode_token(token, expected_type=ACCESS)
        user_id = uuid.UUID(payload.get("sub") or "")
    except (JWTError, ValueError):
        return None

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Return the authenticated user.

    Raises:
        HTTPException 401: Missing, invalid, expired or non-access token, or
            the user no longer exists / is inactive.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user = await _user_from_token(credentials.credentials, db)
    if user is None:
        raise _unauthorized("Could not validate credentials")
    return user


async def get_current_active_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Like ``get_current_user`` but returns ``None`` instead of raising.

    Used by public endpoints that attach the visitor when signed in
    (e.g. enquiry submission).
    """
    if credentials is None:
        return None
    return await _user_from_token(credentials.credentials, db)


async def require_owner(user: User = Depends(get_current_active_user)) -> User:
    """Owner console access: role ``owner`` or ``admin``."""
    if not user.can_manage_properties:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Owner or admin role required",
        )
    return user


async def require_admin(user: User = Depends(get_current_active_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user
