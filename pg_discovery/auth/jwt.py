"""Signed JWT access/refresh tokens (python-jose, HS256 by default)."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from pg_discovery.config import settings

ACCESS = "access"
REFRESH = "refresh"


def _encode(claims: dict, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + lifetime, "type": token_type}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Short-lived token sent as ``Authorization: Bearer``. ``data`` must carry ``sub``."""
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    return _encode(data, ACCESS, lifetime)


def create_refresh_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Long-lived token exchanged at ``/api/auth/refresh`` for a new pair."""
    lifetime = expires_delta or timedelta(days=settings.jwt_refresh_token_expire_days)
    return _encode(data, REFRESH, lifetime)


def decode_token(token: str, expected_type: str | None = None) -> dict:
    """Verify signature and expiry, optionally the token type.

    Raises:
        jose.JWTError: Invalid, expired or of the wrong type.
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    if expected_type is not None and payload.get("type") != expected_type:
        raise JWTError(f"Expected a {expected_type} token")
    return payload


def create_token_pair(user_id: str, role: str | None = None) -> dict[str, str]:
    """Access + refresh tokens for a user. The role claim is informational only;
    authorization always re-reads the user's role from the database."""
    claims: dict = {"sub": user_id}
    if role is not None:
        claims["role"] = role
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
        "token_type": "bearer",
    }
