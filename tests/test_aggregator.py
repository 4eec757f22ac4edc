import pytest

from core.aggregator import OutcomeAggregator
from core.models import SINGLE, DOUBLE, LUX
from inventory.rooms import RoomInventory

from conftest import make_booking


@pytest.fixture
def inventory(room_counts):
    return RoomInventory(room_counts)


def test_mean_of_recorded_samples(inventory):
    aggregator = OutcomeAggregator(inventory)
    aggregator.record_sample(SINGLE, 1, 0.5)
    aggregator.record_sample(SINGLE, 2, 1.0)
    assert aggregator.mean_occupancy(SINGLE) == pytest.approx(0.75)


def test_mean_without_samples_is_zero(inventory):
    assert OutcomeAggregator(inventory).mean_occupancy(LUX) == 0.0


def test_record_day_samples_inventory(inventory):
    aggregator = OutcomeAggregator(inventory)
    inventory.commit(1, SINGLE, 1, 2)
    inventory.commit(2, SINGLE, 2, 2)

    aggregator.record_day(1)
    aggregator.record_day(2)

    assert aggregator.samples(SINGLE) == [0.5, 1.0]
    assert aggregator.samples(DOUBLE) == [0.0, 0.0]
    assert aggregator.days_recorded == 2


def test_weighted_mean_uses_capacity(inventory):
    aggregator = OutcomeAggregator(inventory)
    # Single has 2 rooms, Lux 1; the other types stay empty
    inventory.commit(1, SINGLE, 1, 1)
    inventory.commit(2, SINGLE, 1, 1)
    inventory.commit(3, LUX, 1, 1)
    aggregator.record_day(1)

    total_capacity = sum(inventory.capacity(t) for t in inventory.registry)
    assert aggregator.weighted_mean_occupancy() == pytest.approx(3 / total_capacity)


def test_counters_follow_events(inventory):
    aggregator = OutcomeAggregator(inventory)
    upgraded = make_booking(2, SINGLE, 1, 1, assigned_type=DOUBLE)

    aggregator.on_book(make_booking(1, SINGLE, 1, 1, assigned_type=SINGLE), True)
    aggregator.on_book(upgraded, True)
    aggregator.on_book(make_booking(3, SINGLE, 1, 1), False)
    aggregator.on_checkin(upgraded, True)
    aggregator.on_checkin(make_booking(4, LUX, 1, 1), False)
    aggregator.on_checkout(upgraded, 3000)

    assert aggregator.total_bookings == 3
    assert aggregator.accepted_bookings == 2
    assert aggregator.rejected_bookings == 1
    assert aggregator.upgraded_bookings == 1
    assert aggregator.acceptance_rate == pytest.approx(2 / 3)
    assert aggregator.successful_checkins == 1
    assert aggregator.missed_checkins == 1
    assert aggregator.total_revenue == 3000
    assert "2 accepted / 3 requested" in aggregator.summary()


def test_occupancy_frame_has_day_rows_and_type_columns(inventory):
    aggregator = OutcomeAggregator(inventory)
    inventory.commit(1, DOUBLE, 0, 0)
    aggregator.record_day(0)
    aggregator.record_day(1)

    frame = aggregator.occupancy_frame()
    assert list(frame.index) == [0, 1]
    assert frame.index.name == 'day'
    assert list(frame.columns) == [str(t) for t in inventory.registry]
    assert frame.loc[0, 'double'] == pytest.approx(0.5)
    assert frame.loc[1, 'double'] == 0.0
