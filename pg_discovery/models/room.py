"""Room and Bed models — the inventory of a PG."""

import uuid
from decimal import Decimal

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_discovery.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

ROOM_TYPES = ("SINGLE", "DOUBLE", "TRIPLE", "OTHER")


class Room(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A rentable room inside a property."""

    __tablename__ = "rooms"

    property_id: Mapped[uuid.UUID] = mapped_column(
        "pg_id",
        ForeignKey("pgs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False, default="SINGLE")  # SINGLE, DOUBLE, TRIPLE, OTHER
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    deposit: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    notice_period: Mapped[str | None] = mapped_column(String(50), default="1 Month")
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # Derived from bed occupancy whenever beds are modeled (see services.occupancy).
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    room_images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    amenities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Relationships
    property: Mapped["Property"] = relationship(back_populates="rooms", lazy="selectin")  # noqa: F821
    beds: Mapped[list["Bed"]] = relationship(
        back_populates="room",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Bed.bed_number",
    )

    __table_args__ = (
        UniqueConstraint("pg_id", "room_number", name="uq_rooms_pg_room_number"),
        Index("rooms_available_idx", "is_available"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, property_id={self.property_id}, room_number={self.room_number!r})>"


class Bed(UUIDPrimaryKeyMixin, Base):
    """A single bed. Leaf of the property → room → bed graph."""

    __tablename__ = "beds"

    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    bed_number: Mapped[str] = mapped_column(String(50), nullable=False)
    is_occupied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    room: Mapped["Room"] = relationship(back_populates="beds", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("room_id", "bed_number", name="uq_beds_room_bed_number"),
        Index("beds_occupied_idx", "is_occupied"),
    )

    def __repr__(self) -> str:
        return f"<Bed(id={self.id}, room_id={self.room_id}, bed_number={self.bed_number!r}, occupied={self.is_occupied})>"
