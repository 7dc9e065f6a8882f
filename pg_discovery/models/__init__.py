"""SQLAlchemy models for PG Discovery.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from pg_discovery.models.enquiry import Enquiry
from pg_discovery.models.guest import Guest
from pg_discovery.models.property import Property
from pg_discovery.models.room import Bed, Room
from pg_discovery.models.safety_audit import SafetyAudit
from pg_discovery.models.user import User

__all__ = [
    "Bed",
    "Enquiry",
    "Guest",
    "Property",
    "Room",
    "SafetyAudit",
    "User",
]
