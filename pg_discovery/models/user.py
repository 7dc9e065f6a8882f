"""User model — authentication, profile and role."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_discovery.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

ROLE_VISITOR = "visitor"
ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A visitor looking for a PG, or an owner/admin running properties."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    auth_provider: Mapped[str] = mapped_column(String(50), nullable=False, default="local")
    auth_provider_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    role: Mapped[str] = mapped_column(String(50), default=ROLE_VISITOR, nullable=False)

    # Relationships
    properties: Mapped[list["Property"]] = relationship("Property", back_populates="owner")  # noqa: F821

    @property
    def can_manage_properties(self) -> bool:
        return self.role in (ROLE_OWNER, ROLE_ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
