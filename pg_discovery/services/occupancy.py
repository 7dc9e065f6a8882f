"""Occupancy calculator — bed counts and starting price derived from rooms and beds.

Bed occupancy is the single source of truth for availability. A room's
``is_available`` flag is derived from its beds whenever beds are modeled;
a room without beds contributes nothing to the bed totals, whatever its flag
says.

All functions here are pure and accept ORM objects or any object exposing the
same attributes (``rooms``, ``beds``, ``base_price``, ``is_occupied``). Missing
or ``None`` collections are treated as empty.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

_ZERO = Decimal("0")


@dataclass(frozen=True)
class OccupancySummary:
    """Derived availability and pricing figures for one property."""

    total_beds: int
    available_beds: int
    starting_price: Decimal

    @property
    def occupied_beds(self) -> int:
        return self.total_beds - self.available_beds

    @property
    def occupancy_rate(self) -> int:
        """Percentage of occupied beds, rounded half-up; 0 when there are no beds."""
        if self.total_beds == 0:
            return 0
        rate = Decimal(self.occupied_beds * 100) / Decimal(self.total_beds)
        return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_beds": self.total_beds,
            "available_beds": self.available_beds,
            "starting_price": self.starting_price,
            "occupancy_rate": self.occupancy_rate,
        }


def _collection(obj: Any, name: str) -> Iterable[Any]:
    return getattr(obj, name, None) or []


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def room_bed_counts(room: Any) -> tuple[int, int]:
    """Return ``(total_beds, available_beds)`` for a single room."""
    beds = list(_collection(room, "beds"))
    available = sum(1 for bed in beds if not getattr(bed, "is_occupied", False))
    return len(beds), available


def starting_price(rooms: Iterable[Any]) -> Decimal:
    """Cheapest room base price, or 0 when there are no priced rooms."""
    prices = [_as_decimal(room.base_price) for room in rooms if getattr(room, "base_price", None) is not None]
    return min(prices) if prices else _ZERO


def compute_occupancy(prop: Any) -> OccupancySummary:
    """Aggregate bed counts and the starting price across a property's rooms."""
    rooms = list(_collection(prop, "rooms"))
    total_beds = 0
    available_beds = 0
    for room in rooms:
        total, available = room_bed_counts(room)
        total_beds += total
        available_beds += available

    return OccupancySummary(
        total_beds=total_beds,
        available_beds=available_beds,
        starting_price=starting_price(rooms),
    )


def room_type_for_bed_count(bed_count: int) -> str:
    """Suggested room type for a number of beds."""
    if bed_count == 1:
        return "SINGLE"
    if bed_count == 2:
        return "DOUBLE"
    if bed_count == 3:
        return "TRIPLE"
    return "OTHER"


def sync_room_with_beds(room: Any) -> None:
    """Re-derive ``capacity`` and ``is_available`` from a room's modeled beds.

    Rooms without beds are left untouched: their manual flag stays, and they
    still contribute zero beds to the property totals.
    """
    total, available = room_bed_counts(room)
    if total == 0:
        return
    room.capacity = total
    room.is_available = available > 0
