"""Property model — a PG (paying-guest) accommodation listed by an owner."""

import uuid

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_discovery.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

GENDERS = ("MALE", "FEMALE", "UNISEX")


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A PG listing. Owns rooms (which own beds), guests and safety audits."""

    __tablename__ = "pgs"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Location
    full_address: Mapped[str | None] = mapped_column(Text, default=None)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    locality: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    lat: Mapped[float | None] = mapped_column(Float, default=None)
    lng: Mapped[float | None] = mapped_column(Float, default=None)

    # Listing
    gender: Mapped[str] = mapped_column(String(10), nullable=False, default="UNISEX")  # MALE, FEMALE, UNISEX
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    thumbnail_image: Mapped[str | None] = mapped_column(String(1024), default=None)
    amenities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Policies
    rules_and_regulations: Mapped[str | None] = mapped_column(Text, default=None)
    check_in_time: Mapped[str | None] = mapped_column(String(5), default=None)  # "14:00"
    check_out_time: Mapped[str | None] = mapped_column(String(5), default=None)  # "11:00"
    min_stay_days: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    cancellation_policy: Mapped[str | None] = mapped_column(Text, default=None)

    # Contact
    manager_name: Mapped[str | None] = mapped_column(String(255), default=None)
    phone_number: Mapped[str | None] = mapped_column(String(15), default=None)
    whatsapp_number: Mapped[str | None] = mapped_column(String(15), default=None)
    email: Mapped[str | None] = mapped_column(String(255), default=None)
    website: Mapped[str | None] = mapped_column(String(500), default=None)

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="properties", lazy="selectin")  # noqa: F821
    rooms: Mapped[list["Room"]] = relationship(  # noqa: F821
        back_populates="property",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Room.room_number",
    )
    # Loaded lazily, only by the unit of work when a property is deleted.
    guests: Mapped[list["Guest"]] = relationship(back_populates="property", cascade="all, delete-orphan")  # noqa: F821
    safety_audits: Mapped[list["SafetyAudit"]] = relationship(  # noqa: F821
        back_populates="property", cascade="all, delete-orphan"
    )
    # No delete cascade: enquiries outlive the property with pg_id set to NULL.
    enquiries: Mapped[list["Enquiry"]] = relationship(back_populates="property")  # noqa: F821

    __table_args__ = (
        Index("city_idx", "city"),
        Index("gender_idx", "gender"),
        Index("published_idx", "is_published"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, slug={self.slug!r}, city={self.city!r})>"
