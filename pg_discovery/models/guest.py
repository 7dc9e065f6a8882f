"""Guest domain model — a resident checked into a room of a PG."""

import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_discovery.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

GUEST_STATUSES = ("active", "checked-out", "upcoming")


class Guest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Guest model — people staying (or about to stay) in a property's room."""

    __tablename__ = "guests"

    property_id: Mapped[uuid.UUID] = mapped_column(
        "pg_id",
        ForeignKey("pgs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(15))
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    check_out_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(20), default="active", index=True)  # active, checked-out, upcoming
    number_of_occupants: Mapped[int] = mapped_column(Integer, default=1)
    notes: Mapped[str | None] = mapped_column(Text)

    # Relationships
    property: Mapped["Property"] = relationship(back_populates="guests")  # noqa: F821
    room: Mapped["Room"] = relationship(lazy="selectin")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Guest(id={self.id}, property_id={self.property_id}, room_id={self.room_id}, status={self.status})>"
