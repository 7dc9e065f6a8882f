"""Seed the database with sample PG listings.

Creates a demo owner and an admin, three PGs in Bengaluru, Pune and Hyderabad
with rooms and beds, a few resident guests, safety audits and enquiries.

Run inside Docker:
    docker compose exec backend python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from pg_discovery.auth.passwords import hash_password
from pg_discovery.database import async_session_factory
from pg_discovery.models.enquiry import Enquiry
from pg_discovery.models.guest import Guest
from pg_discovery.models.property import Property
from pg_discovery.models.room import Bed, Room
from pg_discovery.models.safety_audit import SafetyAudit
from pg_discovery.models.user import User
from pg_discovery.services.occupancy import compute_occupancy, room_type_for_bed_count, sync_room_with_beds
from pg_discovery.services.properties import slugify

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_OWNER = {
    "email": "owner@pgdiscovery.in",
    "password": "owner1234",
    "name": "Ramesh Kumar",
}

DEMO_ADMIN = {
    "email": "admin@pgdiscovery.in",
    "password": "admin1234",
    "name": "Site Admin",
}

# Rooms are (room_number, base_price, deposit, [bed occupied flags])
PGS = [
    {
        "name": "Sunrise Ladies PG",
        "description": (
            "Secure ladies PG in the heart of Koramangala with home-style meals, "
            "24x7 CCTV and a warden on site. Walking distance to Forum Mall and "
            "major tech parks on Hosur Road."
        ),
        "city": "Bengaluru",
        "locality": "Koramangala",
        "address": "14, 5th Block, 17th Main",
        "full_address": "14, 5th Block, 17th Main, Koramangala, Bengaluru 560095",
        "lat": 12.9352,
        "lng": 77.6245,
        "gender": "FEMALE",
        "is_published": True,
        "is_featured": True,
        "amenities": ["WiFi", "Meals", "Power Backup", "Laundry", "CCTV", "Hot Water"],
        "rules_and_regulations": "Gate closes at 10:30 PM. No outside visitors in rooms.",
        "check_in_time": "09:00",
        "check_out_time": "11:00",
        "min_stay_days": 30,
        "manager_name": "Lakshmi Devi",
        "phone_number": "9845012345",
        "whatsapp_number": "9845012345",
        "email": "sunrise.pg@example.in",
        "rooms": [
            ("101", "9500", "19000", [True, False]),
            ("102", "9500", "19000", [True, True]),
            ("201", "14000", "28000", [False]),
            ("202", "7500", "15000", [True, False, False]),
        ],
    },
    {
        "name": "Metro Stay Gents PG",
        "description": (
            "Affordable gents PG near Hinjewadi Phase 1 with gym access, "
            "washing machines and daily housekeeping. Shuttle to the IT park."
        ),
        "city": "Pune",
        "locality": "Hinjewadi",
        "address": "Plot 22, Shivaji Chowk",
        "full_address": "Plot 22, Shivaji Chowk, Hinjewadi Phase 1, Pune 411057",
        "lat": 18.5913,
        "lng": 73.7389,
        "gender": "MALE",
        "is_published": True,
        "is_featured": False,
        "amenities": ["WiFi", "Gym", "Laundry", "Housekeeping", "Parking"],
        "rules_and_regulations": "No smoking or alcohol on the premises.",
        "min_stay_days": 30,
        "manager_name": "Sanjay Patil",
        "phone_number": "9822098765",
        "rooms": [
            ("A1", "6500", "13000", [True, True]),
            ("A2", "6500", "13000", [False, True]),
            ("B1", "5200", "10400", [True, True, True]),
        ],
    },
    {
        "name": "Green Nest Co-living",
        "description": (
            "Modern co-living space in Gachibowli with fully furnished rooms, "
            "a shared kitchen and a rooftop lounge. Opening soon."
        ),
        "city": "Hyderabad",
        "locality": "Gachibowli",
        "address": "3-45, Indira Nagar",
        "gender": "UNISEX",
        "is_published": False,
        "is_featured": False,
        "amenities": ["WiFi", "AC", "Kitchen", "Power Backup"],
        "manager_name": "Farhan Ali",
        "phone_number": "9866011223",
        "rooms": [
            ("G1", "12000", "24000", [False]),
            ("G2", "8500", "17000", [False, False]),
        ],
    },
]

# Guests are placed into occupied beds' rooms: (pg name, room_number, guest fields)
GUESTS = [
    ("Sunrise Ladies PG", "101", {"name": "Priya Sharma", "phone": "9900112233", "email": "priya@example.in"}),
    ("Sunrise Ladies PG", "102", {"name": "Kavya Reddy", "phone": "9900223344", "email": None}),
    ("Sunrise Ladies PG", "102", {"name": "Neha Joshi", "phone": "9900334455", "email": "neha.j@example.in"}),
    ("Metro Stay Gents PG", "A1", {"name": "Rahul Verma", "phone": "9811122233", "email": "rahul.v@example.in"}),
    ("Metro Stay Gents PG", "B1", {"name": "Aditya Kulkarni", "phone": "9811233344", "email": None}),
]

SAFETY_AUDITS = [
    ("Sunrise Ladies PG", "Fire Safety", "Fire extinguishers on every floor", "compliant", "Refilled in January"),
    ("Sunrise Ladies PG", "Electrical", "Main distribution board inspection", "warning", "Loose earthing in DB-2"),
    ("Sunrise Ladies PG", "Security", "CCTV coverage of entry and exit", "compliant", None),
    ("Metro Stay Gents PG", "Structural", "Terrace waterproofing", "critical", "Seepage above room B1"),
    ("Metro Stay Gents PG", "Health", "Drinking water purifier service", "compliant", None),
]

ENQUIRIES = [
    ("Sunrise Ladies PG", {"name": "Ananya Iyer", "phone": "9740011223", "occupation": "Software Engineer",
                           "room_type": "DOUBLE", "message": "Is food included on weekends?"}),
    ("Sunrise Ladies PG", {"name": "Meera Nair", "phone": "9740022334", "occupation": "Student",
                           "room_type": "TRIPLE", "status": "CONTACTED"}),
    ("Metro Stay Gents PG", {"name": "Vikram Singh", "phone": "9890033445", "occupation": "Analyst",
                             "room_type": "DOUBLE", "message": "Looking to move in next month."}),
    (None, {"name": "Rohan Das", "phone": "9830044556", "message": "Any PGs near Whitefield?"}),
]


def _build_rooms(room_specs: list[tuple[str, str, str, list[bool]]]) -> list[Room]:
    rooms = []
    for number, price, deposit, beds in room_specs:
        room = Room(
            room_number=number,
            type=room_type_for_bed_count(len(beds)),
            base_price=Decimal(price),
            deposit=Decimal(deposit),
            beds=[Bed(bed_number=f"B{i}", is_occupied=occupied) for i, occupied in enumerate(beds, start=1)],
        )
        sync_room_with_beds(room)
        rooms.append(room)
    return rooms


async def _reset_user(session, email: str) -> None:
    result = await session.execute(select(User).where(User.email == email))
    existing = result.scalar_one_or_none()
    if existing is None:
        return
    print(f"⚠️  User '{email}' already exists. Deleting and re-seeding...")
    # Rooms, beds, guests and audits cascade from the PG; enquiries are kept.
    owned = await session.execute(select(Property).where(Property.owner_id == existing.id))
    for prop in owned.scalars().all():
        await session.delete(prop)
    await session.flush()
    await session.execute(delete(User).where(User.id == existing.id))
    await session.flush()


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with sample PGs.

    Idempotent: deletes the demo users (and their PGs) before re-creating them.
    """
    async with async_session_factory() as session:
        await _reset_user(session, DEMO_OWNER["email"])
        await _reset_user(session, DEMO_ADMIN["email"])

        # ------------------------------------------------------------------
        # 1. Users
        # ------------------------------------------------------------------
        owner = User(
            email=DEMO_OWNER["email"],
            hashed_password=hash_password(DEMO_OWNER["password"]),
            name=DEMO_OWNER["name"],
            auth_provider="local",
            is_active=True,
            role="owner",
        )
        admin = User(
            email=DEMO_ADMIN["email"],
            hashed_password=hash_password(DEMO_ADMIN["password"]),
            name=DEMO_ADMIN["name"],
            auth_provider="local",
            is_active=True,
            role="admin",
        )
        session.add_all([owner, admin])
        await session.flush()
        print(f"✅ Created owner {owner.email} and admin {admin.email}")

        # ------------------------------------------------------------------
        # 2. PGs with rooms and beds
        # ------------------------------------------------------------------
        pgs: dict[str, Property] = {}
        for spec in PGS:
            data = dict(spec)
            rooms = _build_rooms(data.pop("rooms"))
            prop = Property(owner_id=owner.id, slug=slugify(data["name"]), rooms=rooms, **data)
            session.add(prop)
            await session.flush()
            pgs[prop.name] = prop
            summary = compute_occupancy(prop)
            print(
                f"   🏠 {prop.name}: {prop.locality}, {prop.city} "
                f"({summary.available_beds}/{summary.total_beds} beds free, from ₹{summary.starting_price})"
            )

        # ------------------------------------------------------------------
        # 3. Guests
        # ------------------------------------------------------------------
        today = date.today()
        for offset, (pg_name, room_number, fields) in enumerate(GUESTS):
            prop = pgs[pg_name]
            room = next(r for r in prop.rooms if r.room_number == room_number)
            session.add(
                Guest(
                    property_id=prop.id,
                    room_id=room.id,
                    check_in_date=today - timedelta(days=30 * (offset + 1)),
                    status="active",
                    **fields,
                )
            )
        print(f"✅ Created {len(GUESTS)} guests")

        # ------------------------------------------------------------------
        # 4. Safety audits
        # ------------------------------------------------------------------
        for pg_name, category, item, status, notes in SAFETY_AUDITS:
            session.add(
                SafetyAudit(
                    property_id=pgs[pg_name].id,
                    category=category,
                    item=item,
                    status=status,
                    notes=notes,
                    inspected_by=DEMO_OWNER["name"],
                )
            )
        print(f"✅ Created {len(SAFETY_AUDITS)} safety audits")

        # ------------------------------------------------------------------
        # 5. Enquiries
        # ------------------------------------------------------------------
        for pg_name, fields in ENQUIRIES:
            session.add(
                Enquiry(
                    property_id=pgs[pg_name].id if pg_name else None,
                    move_in_date=today + timedelta(days=21),
                    **fields,
                )
            )
        print(f"✅ Created {len(ENQUIRIES)} enquiries")

        await session.commit()

        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        print(f"   Owner:     {DEMO_OWNER['email']} / {DEMO_OWNER['password']}")
        print(f"   Admin:     {DEMO_ADMIN['email']} / {DEMO_ADMIN['password']}")
        print(f"   PGs:       {len(pgs)} ({sum(p.is_published for p in pgs.values())} published)")
        print(f"   Guests:    {len(GUESTS)}")
        print(f"   Audits:    {len(SAFETY_AUDITS)}")
        print(f"   Enquiries: {len(ENQUIRIES)}")
        print("=" * 60)
        print("🎉 Done! You can now log in at /api/auth/login")


if __name__ == "__main__":
    asyncio.run(seed())
