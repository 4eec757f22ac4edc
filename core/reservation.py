"""
Booking strategies layered on top of the room inventory.

This module handles the transactional side of the hotel: accepting or
rejecting stays, validating arrivals against committed rooms, and billing
departures. Two strategies are provided:
- Trivial: exact room-type matching, no substitution
- Smart: upgrade-only fallback to higher-ranked room types
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Union
import logging

from core.clock import Clock
from core.exceptions import ConfigurationError
from core.models import (
    Booking, BookingStatus, RoomType, RoomTypeRegistry, RoomCounts, RoomCosts,
    Cost, DEFAULT_ROOM_TYPES
)
from inventory.rooms import RoomInventory


class StrategyType(Enum):
    """Available booking strategies."""
    TRIVIAL = "trivial"
    SMART = "smart"


class BookingSystem(ABC):
    """
    Base class for booking strategies.

    A booking system exclusively owns one RoomInventory and reads the
    shared clock to decide check-ins.
    """

    def __init__(
        self,
        room_counts: RoomCounts,
        room_costs: RoomCosts,
        clock: Clock,
        registry: Optional[RoomTypeRegistry] = None
    ):
        self.registry = registry if registry is not None else DEFAULT_ROOM_TYPES
        self._inventory = RoomInventory(room_counts, self.registry)

        missing = [t.name for t in self.registry if t not in room_costs]
        if missing:
            raise ConfigurationError(f"Room cost is not set for: {', '.join(missing)}")
        self._room_costs = dict(room_costs)
        self._clock = clock
        self.logger = logging.getLogger(type(self).__name__)

    @property
    def inventory(self) -> RoomInventory:
        """Owned inventory (read it, do not commit through it)."""
        return self._inventory

    @abstractmethod
    def suitable_types(self, room_type: RoomType) -> List[RoomType]:
        """Room types that may satisfy a request for ``room_type``, in preference order."""
        pass

    def book(self, booking: Booking) -> bool:
        """
        Try to reserve a room for the whole stay.

        Commits into the first suitable type with capacity on every day.
        Nothing is committed on rejection.

        Returns:
            True if accepted, False if rejected
        """
        if booking.is_valid_range:
            for room_type in self.suitable_types(booking.room_type):
                if self._inventory.has_capacity(room_type, booking.day_from, booking.day_to):
                    self._inventory.commit(
                        booking.guest_id, room_type, booking.day_from, booking.day_to
                    )
                    booking.assigned_type = room_type
                    booking.status = BookingStatus.BOOKED
                    if room_type != booking.room_type:
                        self.logger.debug(
                            f"Guest {booking.guest_id} upgraded {booking.room_type} -> {room_type}"
                        )
                    return True

        booking.status = BookingStatus.REJECTED
        return False

    def check_into(self, booking: Booking) -> bool:
        """
        Validate an arrival.

        Accepted when today lies within the stay and the guest still holds
        a suitable room for every remaining day of it.
        """
        if not booking.is_valid_range:
            return False

        today = self._clock.get_time().day
        if not booking.day_from <= today <= booking.day_to:
            self.logger.debug(
                f"Guest {booking.guest_id} arrived on day {today} outside "
                f"stay {booking.day_from}-{booking.day_to}"
            )
            return False

        return any(
            self._inventory.has_active_booking(booking.guest_id, room_type, today, booking.day_to)
            for room_type in self.suitable_types(booking.room_type)
        )

    def get_bill(self, booking: Booking) -> Cost:
        """
        Price of the stay.

        Always the requested type's price, even when the guest was
        upgraded to a more expensive room.
        """
        return self._room_costs[booking.room_type]


class TrivialBookingSystem(BookingSystem):
    """Books only the exact requested room type."""

    def suitable_types(self, room_type: RoomType) -> List[RoomType]:
        return [room_type]


class SmartBookingSystem(BookingSystem):
    """
    Books the requested type, falling back to upgrades.

    Suitable types are the requested one followed by every type ranked
    after it in the registry. Downgrades are never offered.
    """

    def suitable_types(self, room_type: RoomType) -> List[RoomType]:
        return self.registry.upgrades_for(room_type)


def create_booking_system(
    room_counts: RoomCounts,
    room_costs: RoomCosts,
    strategy: Union[StrategyType, str],
    clock: Clock,
    registry: Optional[RoomTypeRegistry] = None
) -> BookingSystem:
    """
    Build a booking system for the selected strategy.

    Args:
        room_counts: Capacity per room type
        room_costs: Price per room type
        strategy: StrategyType or its string value ('trivial', 'smart')
        clock: Shared simulated clock
        registry: Known room types

    Raises:
        ConfigurationError: on an unknown strategy or incomplete tables
    """
    if isinstance(strategy, str):
        try:
            strategy = StrategyType(strategy.lower())
        except ValueError:
            raise ConfigurationError(f"Unknown booking strategy: {strategy}") from None

    if strategy == StrategyType.TRIVIAL:
        return TrivialBookingSystem(room_counts, room_costs, clock, registry)
    elif strategy == StrategyType.SMART:
        return SmartBookingSystem(room_counts, room_costs, clock, registry)
    raise ConfigurationError(f"Unknown booking strategy: {strategy}")
