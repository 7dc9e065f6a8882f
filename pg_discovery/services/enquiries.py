"""Enquiry intake and the owner-side enquiry inbox.

Submission runs the duplicate check and the insert inside the request
transaction. On PostgreSQL a transaction-scoped advisory lock keyed by the
phone number serialises concurrent submissions, so two racing requests from
the same phone cannot both pass the check. SQLite serialises writers itself.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from pg_discovery.config import settings
from pg_discovery.database import dialect_name, utcnow
from pg_discovery.exceptions import DuplicateEnquiryError, NotFoundError, PermissionDeniedError
from pg_discovery.integrations import mailer
from pg_discovery.models.enquiry import Enquiry
from pg_discovery.models.property import Property
from pg_discovery.models.user import User
from pg_discovery.schemas.enquiry import EnquiryCreate

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = (
    "You have already submitted an enquiry in the last 24 hours. "
    "Please wait before submitting again."
)


@dataclass(frozen=True)
class EnquiryNotice:
    """Everything the e-mails need, detached from the database session."""

    enquiry_id: uuid.UUID
    pg_name: str
    owner_email: str | None
    contact_phone: str | None
    contact_email: str | None
    visitor_name: str
    visitor_phone: str
    visitor_email: str | None
    occupation: str | None
    room_type: str | None
    move_in_date: str | None
    message: str | None


async def _lock_phone(db: AsyncSession, phone: str) -> None:
    if dialect_name(db) == "postgresql":
        await db.execute(text("SELECT pg_advisory_xact_lock(hashtext(:key))"), {"key": f"enquiry:{phone}"})


async def has_recent_enquiry(
    db: AsyncSession,
    phone: str,
    pg_id: uuid.UUID | None,
    window: timedelta,
) -> bool:
    """True if ``phone`` enquired within ``window``.

    Scoped to the property when ``pg_id`` is given, across all enquiries
    (general and property-specific) when it is ``None``.
    """
    conditions = [Enquiry.phone == phone, Enquiry.created_at >= utcnow() - window]
    if pg_id is not None:
        conditions.append(Enquiry.property_id == pg_id)
    result = await db.execute(select(Enquiry.id).where(*conditions).limit(1))
    return result.scalar_one_or_none() is not None


async def submit_enquiry(
    db: AsyncSession,
    payload: EnquiryCreate,
    user: User | None = None,
    window: timedelta | None = None,
) -> Enquiry:
    """Validate the target property, reject duplicates and persist a NEW enquiry.

    Raises:
        NotFoundError: The referenced PG does not exist or is not published.
        DuplicateEnquiryError: Same phone within the duplicate window.
    """
    window = window or timedelta(hours=settings.enquiry_duplicate_window_hours)

    if payload.pg_id is not None:
        prop = await db.get(Property, payload.pg_id)
        if prop is None or not prop.is_published:
            raise NotFoundError("The selected PG is no longer available. Please choose another.")

    await _lock_phone(db, payload.phone)
    if await has_recent_enquiry(db, payload.phone, payload.pg_id, window):
        logger.info("Duplicate enquiry rejected: phone=%s pg_id=%s", payload.phone, payload.pg_id)
        raise DuplicateEnquiryError(DUPLICATE_MESSAGE)

    enquiry = Enquiry(
        property_id=payload.pg_id,
        user_id=user.id if user is not None else None,
        status="NEW",
        **payload.model_dump(exclude={"pg_id"}),
    )
    db.add(enquiry)
    await db.flush()
    await db.refresh(enquiry)

    logger.info("Enquiry created: id=%s pg_id=%s phone=%s", enquiry.id, enquiry.property_id, enquiry.phone)
    return enquiry


def build_notice(enquiry: Enquiry) -> EnquiryNotice:
    prop = enquiry.property
    owner_email = None
    if prop is not None:
        owner_email = prop.email or (prop.owner.email if prop.owner is not None else None)
    return EnquiryNotice(
        enquiry_id=enquiry.id,
        pg_name=prop.name if prop is not None else "PG Discovery",
        owner_email=owner_email,
        contact_phone=prop.phone_number if prop is not None else None,
        contact_email=prop.email if prop is not None else None,
        visitor_name=enquiry.name,
        visitor_phone=enquiry.phone,
        visitor_email=enquiry.email,
        occupation=enquiry.occupation,
        room_type=enquiry.room_type,
        move_in_date=enquiry.move_in_date.isoformat() if enquiry.move_in_date else None,
        message=enquiry.message,
    )


async def send_enquiry_emails(notice: EnquiryNotice) -> None:
    """Owner notification plus visitor confirmation. Failures are only logged."""
    if notice.owner_email:
        try:
            await mailer.send_template(
                "enquiry_notification",
                notice.owner_email,
                pg_name=notice.pg_name,
                visitor_name=notice.visitor_name,
                visitor_phone=notice.visitor_phone,
                visitor_email=notice.visitor_email,
                occupation=notice.occupation,
                room_type=notice.room_type,
                move_in_date=notice.move_in_date,
                message=notice.message,
            )
        except Exception:
            logger.exception("Owner notification failed for enquiry %s", notice.enquiry_id)
    else:
        logger.info("No owner e-mail for enquiry %s; notification skipped", notice.enquiry_id)

    if notice.visitor_email:
        try:
            await mailer.send_template(
                "enquiry_confirmation",
                notice.visitor_email,
                pg_name=notice.pg_name,
                visitor_name=notice.visitor_name,
                contact_phone=notice.contact_phone,
                contact_email=notice.contact_email,
            )
        except Exception:
            logger.exception("Visitor confirmation failed for enquiry %s", notice.enquiry_id)


# ---------------------------------------------------------------------------
# Owner / admin inbox
# ---------------------------------------------------------------------------


def _visible_to(user: User) -> list:
    """Filters limiting enquiries to those the user may see."""
    if user.is_admin:
        return []
    owned = select(Property.id).where(Property.owner_id == user.id)
    return [Enquiry.property_id.in_(owned)]


async def list_enquiries(
    db: AsyncSession,
    user: User,
    status: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Enquiry], int]:
    filters = _visible_to(user)
    if status is not None:
        filters.append(Enquiry.status == status)

    total_result = await db.execute(select(func.count()).select_from(Enquiry).where(*filters))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Enquiry).where(*filters).order_by(Enquiry.created_at.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


async def get_enquiry(db: AsyncSession, enquiry_id: uuid.UUID, user: User) -> Enquiry:
    enquiry = await db.get(Enquiry, enquiry_id)
    if enquiry is None:
        raise NotFoundError("Enquiry not found")
    if user.is_admin:
        return enquiry
    if enquiry.property is None or enquiry.property.owner_id != user.id:
        raise PermissionDeniedError("You do not have access to this enquiry")
    return enquiry


async def update_status(db: AsyncSession, enquiry_id: uuid.UUID, user: User, status: str) -> Enquiry:
    enquiry = await get_enquiry(db, enquiry_id, user)
    enquiry.status = status
    db.add(enquiry)
    await db.flush()
    await db.refresh(enquiry)
    logger.info("Enquiry %s marked %s by %s", enquiry.id, status, user.id)
    return enquiry


async def enquiry_stats(db: AsyncSession, user: User) -> dict[str, int]:
    filters = _visible_to(user)
    result = await db.execute(
        select(Enquiry.status, func.count()).where(*filters).group_by(Enquiry.status)
    )
    by_status = dict(result.all())

    last_week_result = await db.execute(
        select(func.count())
        .select_from(Enquiry)
        .where(*filters, Enquiry.created_at >= utcnow() - timedelta(days=7))
    )
    return {
        "total": sum(by_status.values()),
        "new": by_status.get("NEW", 0),
        "contacted": by_status.get("CONTACTED", 0),
        "closed": by_status.get("CLOSED", 0),
        "last_week": last_week_result.scalar_one(),
    }


async def list_for_property(db: AsyncSession, pg_id: uuid.UUID) -> list[Enquiry]:
    result = await db.execute(
        select(Enquiry).where(Enquiry.property_id == pg_id).order_by(Enquiry.created_at.desc())
    )
    return list(result.scalars().all())


async def list_for_visitor(db: AsyncSession, user: User) -> list[Enquiry]:
    result = await db.execute(
        select(Enquiry).where(Enquiry.user_id == user.id).order_by(Enquiry.created_at.desc())
    )
    return list(result.scalars().all())
