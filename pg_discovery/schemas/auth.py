"""Account schemas: sign-up and sign-in payloads, token pairs and user profiles.

Visitors browse and enquire; owners run PGs from the console; admins manage
every PG and every account. Only visitor and owner accounts can be created
through sign-up, admins are promoted by another admin.
"""

import uuid
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

Role = Literal["visitor", "owner", "admin"]
SignupRole = Literal["visitor", "owner"]


def _normalise_email(value):
    return value.strip().lower() if isinstance(value, str) else value


def _strip(value):
    return value.strip() if isinstance(value, str) else value


Email = Annotated[EmailStr, BeforeValidator(_normalise_email)]
DisplayName = Annotated[str, BeforeValidator(_strip), Field(min_length=1, max_length=255)]


class RegisterRequest(BaseModel):
    email: Email
    password: str = Field(..., min_length=8, max_length=128)
    name: DisplayName
    role: SignupRole = "visitor"


class LoginRequest(BaseModel):
    email: Email
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class RoleUpdate(BaseModel):
    """Admin-only role change."""

    role: Role


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Profile as shown in the header menu and the admin user list.

    ``can_manage_properties`` tells the client whether to offer the owner console.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    avatar_url: str | None = None
    auth_provider: str
    is_active: bool
    role: Role
    can_manage_properties: bool
    created_at: datetime


class AuthResult(BaseModel):
    """Returned on sign-up, sign-in and Google sign-in."""

    user: UserResponse
    tokens: TokenPair
