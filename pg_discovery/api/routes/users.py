"""Admin user management: list accounts and change roles."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import get_db, require_admin
from pg_discovery.models.user import User
from pg_discovery.schemas.auth import Role, RoleUpdate, UserResponse
from pg_discovery.schemas.common import ListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/users", tags=["admin"])


@router.get("", response_model=ListResponse[UserResponse], summary="List users")
async def list_users(
    role: Role | None = Query(None),
    search: str | None = Query(None, description="Match name or email (case-insensitive)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> ListResponse[UserResponse]:
    filters = []
    if role is not None:
        filters.append(User.role == role)
    if search:
        pattern = f"%{search}%"
        filters.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

    total = (await db.execute(select(func.count()).select_from(User).where(*filters))).scalar_one()
    result = await db.execute(
        select(User).where(*filters).order_by(User.created_at.desc()).offset(skip).limit(limit)
    )
    return ListResponse[UserResponse](
        data=[UserResponse.model_validate(u) for u in result.scalars().all()],
        total=total,
    )


@router.patch("/{user_id}/role", response_model=UserResponse, summary="Change a user's role")
async def change_role(
    user_id: uuid.UUID,
    body: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserResponse:
    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.id == admin.id and body.role != user.role:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admins cannot change their own role",
        )

    user.role = body.role
    db.add(user)
    await db.flush()
    await db.refresh(user)
    logger.info("Admin %s set role of %s to %s", admin.id, user.id, user.role)
    return UserResponse.model_validate(user)
