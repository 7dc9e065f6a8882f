"""Unit tests for the occupancy calculator."""

from decimal import Decimal
from types import SimpleNamespace

from pg_discovery.services.occupancy import (
    OccupancySummary,
    compute_occupancy,
    room_bed_counts,
    room_type_for_bed_count,
    starting_price,
    sync_room_with_beds,
)


def _bed(occupied: bool) -> SimpleNamespace:
    return SimpleNamespace(is_occupied=occupied)


def _room(price: str | None, beds: list[bool] | None, is_available: bool = True, capacity: int = 1):
    return SimpleNamespace(
        base_price=Decimal(price) if price is not None else None,
        beds=None if beds is None else [_bed(b) for b in beds],
        is_available=is_available,
        capacity=capacity,
    )


class TestComputeOccupancy:
    def test_counts_beds_across_rooms(self):
        prop = SimpleNamespace(rooms=[_room("8000", [True, False, False]), _room("6500", [True])])
        summary = compute_occupancy(prop)
        assert summary.total_beds == 4
        assert summary.available_beds == 2
        assert summary.occupied_beds == 2
        assert summary.starting_price == Decimal("6500")

    def test_no_rooms(self):
        summary = compute_occupancy(SimpleNamespace(rooms=[]))
        assert summary == OccupancySummary(total_beds=0, available_beds=0, starting_price=Decimal("0"))
        assert summary.occupancy_rate == 0

    def test_missing_collections_are_empty(self):
        assert compute_occupancy(SimpleNamespace()).total_beds == 0
        assert compute_occupancy(SimpleNamespace(rooms=None)).total_beds == 0
        assert compute_occupancy(SimpleNamespace(rooms=[_room("5000", None)])).total_beds == 0

    def test_rooms_without_beds_contribute_zero_even_if_available(self):
        prop = SimpleNamespace(rooms=[_room("5000", [], is_available=True), _room("7000", [False])])
        summary = compute_occupancy(prop)
        assert summary.total_beds == 1
        assert summary.available_beds == 1
        # The bedless room still counts towards the starting price.
        assert summary.starting_price == Decimal("5000")

    def test_available_never_exceeds_total(self):
        prop = SimpleNamespace(rooms=[_room("1", [False, False]), _room("2", [True])])
        summary = compute_occupancy(prop)
        assert 0 <= summary.available_beds <= summary.total_beds


class TestOccupancyRate:
    def test_rounds_half_up(self):
        # 1 of 8 occupied = 12.5% -> 13
        assert OccupancySummary(8, 7, Decimal("0")).occupancy_rate == 13

    def test_full(self):
        assert OccupancySummary(3, 0, Decimal("0")).occupancy_rate == 100

    def test_two_thirds(self):
        assert OccupancySummary(3, 1, Decimal("0")).occupancy_rate == 67

    def test_as_dict(self):
        data = OccupancySummary(4, 1, Decimal("9000")).as_dict()
        assert data == {
            "total_beds": 4,
            "available_beds": 1,
            "starting_price": Decimal("9000"),
            "occupancy_rate": 75,
        }


class TestStartingPrice:
    def test_minimum_price(self):
        assert starting_price([_room("9000", []), _room("7500.50", [])]) == Decimal("7500.50")

    def test_ignores_unpriced_rooms(self):
        assert starting_price([_room(None, []), _room("4000", [])]) == Decimal("4000")

    def test_accepts_plain_numbers(self):
        assert starting_price([SimpleNamespace(base_price=4500), SimpleNamespace(base_price=3999.5)]) == Decimal("3999.5")

    def test_empty(self):
        assert starting_price([]) == Decimal("0")


class TestRoomHelpers:
    def test_room_bed_counts(self):
        assert room_bed_counts(_room("1", [True, False, False])) == (3, 2)

    def test_room_type_for_bed_count(self):
        assert room_type_for_bed_count(1) == "SINGLE"
        assert room_type_for_bed_count(2) == "DOUBLE"
        assert room_type_for_bed_count(3) == "TRIPLE"
        assert room_type_for_bed_count(4) == "OTHER"
        assert room_type_for_bed_count(0) == "OTHER"

    def test_sync_marks_full_room_unavailable(self):
        room = _room("1", [True, True], is_available=True, capacity=5)
        sync_room_with_beds(room)
        assert room.is_available is False
        assert room.capacity == 2

    def test_sync_marks_room_with_free_bed_available(self):
        room = _room("1", [True, False], is_available=False)
        sync_room_with_beds(room)
        assert room.is_available is True

    def test_sync_leaves_bedless_room_alone(self):
        room = _room("1", [], is_available=False, capacity=3)
        sync_room_with_beds(room)
        assert room.is_available is False
        assert room.capacity == 3
