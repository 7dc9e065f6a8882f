"""Enquiry model — a visitor lead for a property (or a general enquiry)."""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_discovery.database import Base, UUIDPrimaryKeyMixin, utcnow

ENQUIRY_STATUSES = ("NEW", "CONTACTED", "CLOSED")


class Enquiry(UUIDPrimaryKeyMixin, Base):
    """Visitor interest in a PG. ``property_id`` is NULL for general enquiries."""

    __tablename__ = "enquiries"

    property_id: Mapped[uuid.UUID | None] = mapped_column(
        "pg_id",
        ForeignKey("pgs.id", ondelete="SET NULL"),
        nullable=True,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(15), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), default=None)
    occupation: Mapped[str | None] = mapped_column(String(255), default=None)
    room_type: Mapped[str | None] = mapped_column(String(50), default=None)
    move_in_date: Mapped[date | None] = mapped_column(Date, default=None)
    message: Mapped[str | None] = mapped_column(Text, default=None)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="NEW", index=True)  # NEW, CONTACTED, CLOSED
    created_at: Mapped[datetime] = mapped_column(default=utcnow, server_default=func.now())

    property: Mapped["Property | None"] = relationship(back_populates="enquiries", lazy="selectin")  # noqa: F821

    __table_args__ = (Index("spam_check_idx", "pg_id", "phone", "created_at"),)

    def __repr__(self) -> str:
        return f"<Enquiry(id={self.id}, property_id={self.property_id}, phone={self.phone!r}, status={self.status})>"
