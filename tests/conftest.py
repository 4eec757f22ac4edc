"""Shared fixtures for the hotel simulator tests."""

from typing import List, Optional, Tuple

import pytest

from core.clock import ManualClock
from core.models import Booking, RoomTypeRegistry, RoomType, SimTime, DEFAULT_ROOM_TYPES


@pytest.fixture
def registry():
    return DEFAULT_ROOM_TYPES


@pytest.fixture
def two_types():
    """Hotel with just Single and Double rooms."""
    return RoomTypeRegistry(["Single", "Double"])


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def room_counts(registry):
    return {t: c for t, c in zip(registry, [2, 2, 1, 1, 1])}


@pytest.fixture
def room_costs(registry):
    return {t: c for t, c in zip(registry, [3000, 4000, 4500, 5000, 10000])}


class ScriptedGenerator:
    """
    Request generator with predetermined draws.

    ``requests`` holds (room type, lead days, stay days) per booking and
    ``intervals`` the hours between bookings; the last interval repeats.
    """

    def __init__(self, requests: List[Tuple[RoomType, int, int]], intervals: List[int]):
        self.requests = list(requests)
        self.intervals = list(intervals)

    def next_booking_time(self, now: SimTime) -> SimTime:
        interval = self.intervals.pop(0) if len(self.intervals) > 1 else self.intervals[0]
        return now.add_hours(interval)

    def generate(self, guest_id: int, today: int) -> Booking:
        room_type, lead, stay = self.requests.pop(0)
        day_from = today + lead
        return Booking(guest_id, room_type, day_from, day_from + stay - 1)


class RecordingObserver:
    """Observer keeping every notification in order."""

    def __init__(self):
        self.events = []

    def on_book(self, booking, success):
        self.events.append(('book', booking.guest_id, success))

    def on_checkin(self, booking, success):
        self.events.append(('checkin', booking.guest_id, success))

    def on_checkout(self, booking, cost):
        self.events.append(('checkout', booking.guest_id, cost))

    def of_kind(self, kind: str) -> list:
        return [e for e in self.events if e[0] == kind]


@pytest.fixture
def recorder():
    return RecordingObserver()


def make_booking(guest_id: int, room_type: RoomType, day_from: int, day_to: int,
                 assigned_type: Optional[RoomType] = None) -> Booking:
    booking = Booking(guest_id, room_type, day_from, day_to)
    booking.assigned_type = assigned_type
    return booking
