"""
Room inventory: capacity per room type and the per-day occupancy ledger.

Key concepts:
- Capacity: fixed number of rooms per type for the life of the inventory
- Occupancy ledger: for each (type, day), the set of guests holding a room
- Capacity invariant: a ledger entry never holds more guests than capacity
"""

from collections import defaultdict
from typing import Dict, Set, FrozenSet, Optional
import logging

from core.models import RoomType, RoomTypeRegistry, RoomCounts, GuestId, DEFAULT_ROOM_TYPES
from core.exceptions import ConfigurationError, CapacityExceededError, InvariantViolation

logger = logging.getLogger(__name__)


class RoomInventory:
    """
    Per-type, per-day room occupancy for a single hotel.

    Intended for single-writer use. A concurrent caller would have to run
    ``has_capacity`` and ``commit`` as one atomic unit per booking, or two
    bookings could both see the last free room.
    """

    def __init__(
        self,
        room_counts: RoomCounts,
        registry: Optional[RoomTypeRegistry] = None
    ):
        """
        Initialize inventory.

        Args:
            room_counts: Capacity for every room type in the registry
            registry: Known room types (defaults to the standard hotel set)

        Raises:
            ConfigurationError: if a type is missing or a count is negative
        """
        self.registry = registry if registry is not None else DEFAULT_ROOM_TYPES

        missing = [t.name for t in self.registry if t not in room_counts]
        if missing:
            raise ConfigurationError(f"Room count is not set for: {', '.join(missing)}")
        negative = [t.name for t in self.registry if room_counts[t] < 0]
        if negative:
            raise ConfigurationError(f"Room count must be non-negative for: {', '.join(negative)}")

        self._capacity: Dict[RoomType, int] = {t: int(room_counts[t]) for t in self.registry}
        # room type -> day -> guests holding a room that day
        self._ledger: Dict[RoomType, Dict[int, Set[GuestId]]] = {
            t: defaultdict(set) for t in self.registry
        }

    def capacity(self, room_type: RoomType) -> int:
        """Number of rooms of this type."""
        return self._capacity[room_type]

    def occupied(self, room_type: RoomType, day: int) -> int:
        """Number of guests holding a room of this type on a day."""
        guests = self._ledger[room_type].get(day)
        return len(guests) if guests else 0

    def occupancy_rate(self, room_type: RoomType, day: int) -> float:
        """Busy fraction (0.0 to 1.0); zero-capacity types report 0.0."""
        capacity = self._capacity[room_type]
        if capacity == 0:
            return 0.0
        return self.occupied(room_type, day) / capacity

    def guests(self, room_type: RoomType, day: int) -> FrozenSet[GuestId]:
        """Snapshot of guests holding this type on a day."""
        return frozenset(self._ledger[room_type].get(day, ()))

    def has_capacity(self, room_type: RoomType, day_from: int, day_to: int) -> bool:
        """
        Check whether one more guest fits on every day of the range.

        Zero-capacity types are never available, and an inverted range
        (day_to < day_from) never has capacity.
        """
        capacity = self._capacity[room_type]
        if capacity == 0 or day_to < day_from:
            return False

        days = self._ledger[room_type]
        for day in range(day_from, day_to + 1):
            guests = days.get(day)
            if guests is not None and len(guests) >= capacity:
                return False
        return True

    def commit(self, guest_id: GuestId, room_type: RoomType, day_from: int, day_to: int) -> None:
        """
        Register a guest on every day of the range.

        Callers must check ``has_capacity`` for the same type and range
        first. The whole range is validated before the ledger is touched.

        Raises:
            InvariantViolation: if the range is inverted
            CapacityExceededError: if some day is already full
        """
        if day_to < day_from:
            logger.error(f"Commit for guest {guest_id} has inverted range {day_from}-{day_to}")
            raise InvariantViolation(f"Cannot commit days {day_from}-{day_to}: range is inverted")

        capacity = self._capacity[room_type]
        days = self._ledger[room_type]
        for day in range(day_from, day_to + 1):
            guests = days.get(day)
            if len(guests or ()) >= capacity:
                logger.error(f"Commit for guest {guest_id} overflows {room_type} on day {day}")
                raise CapacityExceededError(room_type, day, capacity)

        for day in range(day_from, day_to + 1):
            days[day].add(guest_id)

        logger.debug(f"Committed guest {guest_id} to {room_type} for days {day_from}-{day_to}")

    def has_active_booking(
        self,
        guest_id: GuestId,
        room_type: RoomType,
        day_from: int,
        day_to: int
    ) -> bool:
        """Check that the guest holds this type on every day of the range (never for an inverted one)."""
        if day_to < day_from:
            return False

        days = self._ledger[room_type]
        for day in range(day_from, day_to + 1):
            guests = days.get(day)
            if not guests or guest_id not in guests:
                return False
        return True

    def __str__(self) -> str:
        counts = ", ".join(f"{t}={c}" for t, c in self._capacity.items())
        return f"RoomInventory({counts})"
