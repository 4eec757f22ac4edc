"""Tests for the tick-driven demand simulator."""

import pytest

from core.events import EventManager
from core.models import BookingStatus, SimTime, SINGLE, LUX, HOURS_IN_DAY
from core.reservation import SmartBookingSystem, TrivialBookingSystem
from core.simulator import DemandSimulator
from conftest import ScriptedGenerator


@pytest.fixture
def system(room_counts, room_costs, clock, registry):
    return TrivialBookingSystem(room_counts, room_costs, clock, registry)


def make_simulator(system, clock, requests, intervals, recorder=None):
    simulator = DemandSimulator(system, clock, ScriptedGenerator(requests, intervals), EventManager())
    if recorder is not None:
        simulator.add_observer(recorder)
    return simulator


class MissingGuestSystem(TrivialBookingSystem):
    """Accepts bookings but never validates an arrival."""

    def check_into(self, booking):
        return False


def test_first_booking_scheduled_from_start(system, clock):
    simulator = make_simulator(system, clock, [(SINGLE, 1, 1)], [3])
    assert simulator.next_booking_time == SimTime(0, 3)


def test_no_booking_before_next_booking_time(system, clock, recorder):
    simulator = make_simulator(system, clock, [(SINGLE, 1, 1)], [2], recorder)

    assert simulator.advance() is None
    clock.add(1)
    assert simulator.advance() is None
    clock.add(1)
    booking = simulator.advance()

    assert booking is not None
    assert booking.guest_id == 0
    assert recorder.events == [('book', 0, True)]


def test_tick_order_checkout_checkin_then_book(system, clock, recorder):
    requests = [(SINGLE, 0, 1), (SINGLE, 1, 1), (LUX, 0, 1)]
    simulator = make_simulator(system, clock, requests, [0, 1, 23, 100], recorder)

    # day 0, hour 0: guest 0 books tonight
    simulator.advance()
    clock.add(1)
    # day 0, hour 1: guest 0 arrives, guest 1 books tomorrow
    simulator.advance()
    assert recorder.events == [('book', 0, True), ('checkin', 0, True), ('book', 1, True)]

    clock.add(23)
    recorder.events.clear()
    # day 1, hour 0: guest 0 leaves, guest 1 arrives, guest 2 books
    simulator.advance()

    assert recorder.events == [
        ('checkout', 0, 3000),
        ('checkin', 1, True),
        ('book', 2, True),
    ]


def test_guest_ids_are_sequential(system, clock):
    requests = [(SINGLE, 1, 1), (SINGLE, 1, 1), (LUX, 1, 1)]
    simulator = make_simulator(system, clock, requests, [1])

    ids = []
    for _ in range(3):
        clock.add(1)
        ids.append(simulator.advance().guest_id)

    assert ids == [0, 1, 2]


def test_next_booking_rescheduled_after_rejection(system, clock, recorder):
    requests = [(LUX, 1, 2), (LUX, 1, 2)]
    simulator = make_simulator(system, clock, requests, [0, 1, 5], recorder)

    simulator.advance()
    assert simulator.next_booking_time == SimTime(0, 1)

    clock.add(1)
    booking = simulator.advance()

    assert booking.status == BookingStatus.REJECTED
    assert recorder.of_kind('book') == [('book', 0, True), ('book', 1, False)]
    assert simulator.next_booking_time == SimTime(0, 6)


def test_rejected_booking_is_not_queued(system, clock):
    simulator = make_simulator(system, clock, [(LUX, 1, 2), (LUX, 1, 2)], [0, 0, 100])

    simulator.advance()
    simulator.advance()

    assert simulator.pending_checkins == 1
    assert simulator.pending_checkouts == 1


def test_missed_checkin_drops_checkout(room_counts, room_costs, clock, registry, recorder):
    system = MissingGuestSystem(room_counts, room_costs, clock, registry)
    simulator = make_simulator(system, clock, [(SINGLE, 0, 2)], [0, 1000], recorder)

    booking = simulator.advance()
    clock.add(1)
    simulator.advance()

    assert booking.status == BookingStatus.MISSED
    assert simulator.pending_checkouts == 0

    clock.add(5 * HOURS_IN_DAY)
    simulator.advance()

    assert recorder.of_kind('checkin') == [('checkin', 0, False)]
    assert recorder.of_kind('checkout') == []


def test_missed_checkin_keeps_other_checkouts(room_counts, room_costs, clock, registry, recorder):
    class FirstGuestMissing(TrivialBookingSystem):
        def check_into(self, booking):
            return booking.guest_id != 0 and super().check_into(booking)

    system = FirstGuestMissing(room_counts, room_costs, clock, registry)
    simulator = make_simulator(system, clock, [(SINGLE, 1, 1), (LUX, 1, 1)], [0, 0, 1000], recorder)

    simulator.advance()
    simulator.advance()
    assert simulator.pending_checkouts == 2

    clock.add(HOURS_IN_DAY)
    simulator.advance()
    assert simulator.pending_checkins == 0
    assert simulator.pending_checkouts == 1

    clock.add(HOURS_IN_DAY)
    simulator.advance()
    assert recorder.of_kind('checkout') == [('checkout', 1, 10000)]


def test_catch_up_after_multi_day_step(system, clock, recorder):
    # Stay on days 1-2, departure due on day 3
    simulator = make_simulator(system, clock, [(SINGLE, 1, 2)], [0, 1000], recorder)

    booking = simulator.advance()
    clock.add(2 * HOURS_IN_DAY)
    simulator.advance()

    assert booking.status == BookingStatus.CHECKED_IN
    assert recorder.of_kind('checkout') == []

    clock.add(3 * HOURS_IN_DAY)
    simulator.advance()

    assert booking.status == BookingStatus.CHECKED_OUT
    assert recorder.of_kind('checkout') == [('checkout', 0, 3000)]
    assert simulator.pending_checkins == 0
    assert simulator.pending_checkouts == 0


def test_catch_up_past_whole_stay_is_missed(system, clock, recorder):
    simulator = make_simulator(system, clock, [(SINGLE, 1, 2)], [0, 1000], recorder)

    booking = simulator.advance()
    clock.add(10 * HOURS_IN_DAY)
    simulator.advance()

    assert booking.status == BookingStatus.MISSED
    assert recorder.events == [('book', 0, True), ('checkin', 0, False)]


def test_catch_up_processes_days_in_order(system, clock, recorder):
    # Guest 0 stays on day 1 only, guest 1 on days 2-3
    requests = [(SINGLE, 1, 1), (SINGLE, 2, 2)]
    simulator = make_simulator(system, clock, requests, [0, 0, 1000], recorder)

    simulator.advance()
    simulator.advance()
    recorder.events.clear()

    clock.add(2 * HOURS_IN_DAY)
    simulator.advance()

    # guest 0 arrives on day 1 but the clock already reads day 2,
    # so the arrival is outside the stay and counts as missed
    assert recorder.events == [('checkin', 0, False), ('checkin', 1, True)]


def test_remove_observer_stops_notifications(system, clock, recorder):
    simulator = make_simulator(system, clock, [(SINGLE, 1, 1), (SINGLE, 1, 1)], [0, 1], recorder)

    simulator.advance()
    assert simulator.remove_observer(recorder)
    assert not simulator.remove_observer(recorder)

    clock.add(1)
    simulator.advance()

    assert recorder.events == [('book', 0, True)]


def test_bill_uses_requested_type_after_upgrade(room_counts, room_costs, clock, registry, recorder):
    system = SmartBookingSystem(room_counts, room_costs, clock, registry)
    requests = [(SINGLE, 0, 1), (SINGLE, 0, 1), (SINGLE, 0, 1)]
    simulator = make_simulator(system, clock, requests, [0, 0, 0, 1000], recorder)

    bookings = [simulator.advance() for _ in range(3)]
    assert bookings[2].is_upgraded

    clock.add(1)
    simulator.advance()
    clock.add(HOURS_IN_DAY)
    simulator.advance()

    assert [e[2] for e in recorder.of_kind('checkout')] == [3000, 3000, 3000]
