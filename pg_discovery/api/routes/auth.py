"""Auth API router — register, login, refresh, me and Google sign-in."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.api.deps import get_current_active_user, get_db
from pg_discovery.auth.jwt import REFRESH, create_token_pair, decode_token
from pg_discovery.auth.oauth import google_profile, oauth
from pg_discovery.auth.passwords import hash_password, verify_password
from pg_discovery.config import settings
from pg_discovery.models.user import User
from pg_discovery.schemas.auth import (
    AuthResult,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResult:
    tokens = create_token_pair(str(user.id), role=user.role)
    return AuthResult(user=UserResponse.model_validate(user), tokens=TokenPair(**tokens))


async def _find_or_create_google_user(db: AsyncSession, profile: dict) -> User:
    """Look up the user by e-mail; create a visitor account on first sign-in."""
    result = await db.execute(select(User).where(User.email == profile["email"]))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(
            email=profile["email"],
            name=profile["name"],
            avatar_url=profile["avatar_url"],
            auth_provider="google",
            auth_provider_id=profile["provider_id"],
            hashed_password=None,
        )
        db.add(user)
        logger.info("Created account for %s via Google", profile["email"])
    else:
        user.auth_provider = "google"
        user.auth_provider_id = profile["provider_id"]
        if profile["avatar_url"]:
            user.avatar_url = profile["avatar_url"]

    await db.flush()
    await db.refresh(user)
    return user


# ---------------------------------------------------------------------------
# Email + password
# ---------------------------------------------------------------------------


@router.post("/register", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)) -> AuthResult:
    """Create a visitor or owner account. Admins are promoted by another admin."""
    email = body.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "Email already registered", "code": "CONFLICT"},
        )

    user = User(
        email=email,
        hashed_password=hash_password(body.password),
        name=body.name,
        auth_provider="local",
        role=body.role,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    logger.info("Registered %s as %s", user.email, user.role)
    return _auth_response(user)


@router.post("/login", response_model=AuthResult)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)) -> AuthResult:
    result = await db.execute(select(User).where(User.email == body.email.lower()))
    user = result.scalar_one_or_none()

    # Unknown e-mail, OAuth-only account and wrong password look the same.
    if user is None or user.hashed_password is None or not verify_password(body.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")

    return _auth_response(user)


@router.post("/refresh", response_model=TokenPair)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)) -> TokenPair:
    """Exchange a refresh token for a new token pair."""
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(body.refresh_token, expected_type=REFRESH)
        user_id = uuid.UUID(payload.get("sub") or "")
    except (JWTError, ValueError):
        raise invalid from None

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise invalid

    return TokenPair(**create_token_pair(str(user.id), role=user.role))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_active_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


# ---------------------------------------------------------------------------
# Google OAuth
# ---------------------------------------------------------------------------


@router.get("/google")
async def google_login(request: Request) -> RedirectResponse:
    """Redirect to Google's consent screen."""
    return await oauth.google.authorize_redirect(request, settings.google_redirect_uri)  # type: ignore[return-value]


@router.get("/google/callback")
async def google_callback(request: Request, db: AsyncSession = Depends(get_db)) -> RedirectResponse:
    """Finish Google sign-in and hand the tokens to the frontend."""
    try:
        token = await oauth.google.authorize_access_token(request)
    except Exception as exc:
        logger.warning("Google OAuth callback failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Google authentication failed. Please try again.",
        ) from None

    profile = google_profile(token)
    if not profile["email"]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Google account has no e-mail address",
        )

    user = await _find_or_create_google_user(db, profile)
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")

    tokens = create_token_pair(str(user.id), role=user.role)
    return RedirectResponse(
        url=(
            f"{settings.frontend_url}/auth/callback"
            f"?access_token={tokens['access_token']}"
            f"&refresh_token={tokens['refresh_token']}"
        )
    )
