"""Safety audit model — compliance checks recorded against a property."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_discovery.database import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow

AUDIT_CATEGORIES = ("Fire Safety", "Electrical", "Structural", "Health", "Security")
AUDIT_STATUSES = ("compliant", "warning", "critical")


class SafetyAudit(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """One inspected item, e.g. "Fire extinguisher installed" under Fire Safety."""

    __tablename__ = "safety_audits"

    property_id: Mapped[uuid.UUID] = mapped_column(
        "pg_id",
        ForeignKey("pgs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    item: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # compliant, warning, critical
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    inspected_by: Mapped[str | None] = mapped_column(String(255), default=None)
    last_checked: Mapped[datetime] = mapped_column(default=utcnow, server_default=func.now())

    property: Mapped["Property"] = relationship(back_populates="safety_audits")  # noqa: F821

    def __repr__(self) -> str:
        return f"<SafetyAudit(id={self.id}, category={self.category!r}, status={self.status})>"
