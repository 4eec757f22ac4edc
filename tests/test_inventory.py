import pytest

from core.exceptions import CapacityExceededError, ConfigurationError, InvariantViolation
from core.models import RoomTypeRegistry, SINGLE, DOUBLE, LUX
from inventory.rooms import RoomInventory


@pytest.fixture
def inventory(room_counts):
    return RoomInventory(room_counts)


def test_missing_room_type_fails_construction(room_counts):
    del room_counts[LUX]
    with pytest.raises(ConfigurationError, match="Lux"):
        RoomInventory(room_counts)


def test_negative_count_fails_construction(room_counts):
    room_counts[DOUBLE] = -1
    with pytest.raises(ConfigurationError):
        RoomInventory(room_counts)


def test_full_range_blocks_third_guest(two_types):
    # Two singles, both taken for days 1-3
    single = two_types.get("Single")
    inventory = RoomInventory({single: 2, two_types.get("Double"): 0}, two_types)

    for guest in (1, 2):
        assert inventory.has_capacity(single, 1, 3)
        inventory.commit(guest, single, 1, 3)

    assert not inventory.has_capacity(single, 1, 3)
    for day in (1, 2, 3):
        assert inventory.occupied(single, day) == 2
    assert inventory.has_capacity(single, 4, 5)


def test_partial_overlap_blocks_range(inventory):
    inventory.commit(1, SINGLE, 5, 5)
    inventory.commit(2, SINGLE, 5, 6)
    assert not inventory.has_capacity(SINGLE, 1, 5)
    assert inventory.has_capacity(SINGLE, 6, 8)


def test_zero_capacity_is_never_available(two_types):
    inventory = RoomInventory({two_types.get("Single"): 1, two_types.get("Double"): 0}, two_types)
    assert not inventory.has_capacity(two_types.get("Double"), 1, 1)
    assert inventory.occupancy_rate(two_types.get("Double"), 1) == 0.0


def test_inverted_range_has_no_capacity(inventory):
    assert not inventory.has_capacity(SINGLE, 4, 3)


def test_queries_do_not_change_state(inventory):
    inventory.commit(1, SINGLE, 2, 4)
    before = [inventory.guests(SINGLE, d) for d in range(0, 8)]
    answers = {inventory.has_capacity(SINGLE, 1, 6) for _ in range(5)}
    assert len(answers) == 1
    assert [inventory.guests(SINGLE, d) for d in range(0, 8)] == before
    # Looking at empty days does not create ledger entries
    assert inventory.occupied(SINGLE, 100) == 0
    assert inventory.guests(SINGLE, 100) == frozenset()


def test_commit_registers_every_day(inventory):
    inventory.commit(42, DOUBLE, 3, 6)
    assert inventory.has_active_booking(42, DOUBLE, 3, 6)
    assert inventory.has_active_booking(42, DOUBLE, 5, 6)
    assert not inventory.has_active_booking(42, DOUBLE, 3, 7)
    assert not inventory.has_active_booking(42, SINGLE, 3, 6)
    assert not inventory.has_active_booking(7, DOUBLE, 3, 6)


def test_commit_without_capacity_is_an_invariant_violation(inventory):
    inventory.commit(1, LUX, 1, 2)
    with pytest.raises(CapacityExceededError) as excinfo:
        inventory.commit(2, LUX, 0, 3)

    assert isinstance(excinfo.value, InvariantViolation)
    assert excinfo.value.day == 1
    # Nothing from the failed commit reached the ledger
    for day in range(0, 4):
        assert 2 not in inventory.guests(LUX, day)
    assert inventory.occupied(LUX, 0) == 0


def test_commit_inverted_range_raises(inventory):
    assert not inventory.has_capacity(SINGLE, 5, 3)
    with pytest.raises(InvariantViolation):
        inventory.commit(9, SINGLE, 5, 3)
    for day in range(0, 8):
        assert inventory.occupied(SINGLE, day) == 0


def test_inverted_range_is_never_an_active_booking(inventory):
    assert not inventory.has_active_booking(9, SINGLE, 5, 3)
    inventory.commit(9, SINGLE, 3, 5)
    assert not inventory.has_active_booking(9, SINGLE, 5, 3)


def test_empty_registry_is_kept():
    empty = RoomTypeRegistry([])
    inventory = RoomInventory({}, empty)
    assert inventory.registry is empty
    assert len(inventory.registry) == 0


def test_occupancy_never_exceeds_capacity(inventory, registry):
    guest = 0
    for day_from in range(0, 10):
        for room_type in registry:
            if inventory.has_capacity(room_type, day_from, day_from + 3):
                inventory.commit(guest, room_type, day_from, day_from + 3)
            guest += 1

    for room_type in registry:
        for day in range(0, 15):
            assert inventory.occupied(room_type, day) <= inventory.capacity(room_type)
            assert 0.0 <= inventory.occupancy_rate(room_type, day) <= 1.0
