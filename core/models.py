"""
Core data models for the hotel room allocation simulator.

This module defines the fundamental data structures representing room types,
bookings, simulated time, and other core entities.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Iterable, Iterator

HOURS_IN_DAY = 24


@dataclass(frozen=True)
class RoomType:
    """Room category with its own capacity and price."""
    code: str
    name: str
    rank: int  # Position in the upgrade order (0 = cheapest)

    def __str__(self) -> str:
        return self.name.lower()


class RoomTypeRegistry:
    """
    Ordered set of room types known to a hotel.

    The order defines the upgrade direction: a type ranked later is an
    acceptable substitute for one ranked earlier, never the reverse.
    """

    def __init__(self, names: Iterable[str]):
        self._types: List[RoomType] = []
        self._by_code: Dict[str, RoomType] = {}
        for rank, name in enumerate(names):
            code = name.upper()
            if code in self._by_code:
                raise ValueError(f"Duplicate room type: {name}")
            room_type = RoomType(code=code, name=name, rank=rank)
            self._types.append(room_type)
            self._by_code[code] = room_type

    def get(self, code: str) -> RoomType:
        """Look up a room type by code or name (case-insensitive)."""
        try:
            return self._by_code[code.upper()]
        except KeyError:
            raise KeyError(f"Unknown room type: {code}") from None

    def upgrades_for(self, room_type: RoomType) -> List[RoomType]:
        """Requested type followed by every type ranked after it."""
        if room_type not in self:
            raise KeyError(f"Unknown room type: {room_type}")
        return self._types[room_type.rank:]

    def __contains__(self, room_type: object) -> bool:
        return (isinstance(room_type, RoomType)
                and room_type.rank < len(self._types)
                and self._types[room_type.rank] == room_type)

    def __iter__(self) -> Iterator[RoomType]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __getitem__(self, index: int) -> RoomType:
        return self._types[index]

    def __str__(self) -> str:
        return f"RoomTypeRegistry({', '.join(t.name for t in self._types)})"


DEFAULT_ROOM_TYPES = RoomTypeRegistry(
    ["Single", "Double", "DoubleWithSofa", "HalfLux", "Lux"]
)

SINGLE = DEFAULT_ROOM_TYPES.get("Single")
DOUBLE = DEFAULT_ROOM_TYPES.get("Double")
DOUBLE_WITH_SOFA = DEFAULT_ROOM_TYPES.get("DoubleWithSofa")
HALF_LUX = DEFAULT_ROOM_TYPES.get("HalfLux")
LUX = DEFAULT_ROOM_TYPES.get("Lux")


class BookingStatus(Enum):
    """Lifecycle of a single booking."""
    REQUESTED = "requested"
    BOOKED = "booked"
    REJECTED = "rejected"
    CHECKED_IN = "checked_in"
    MISSED = "missed"  # Check-in query failed, no check-out follows
    CHECKED_OUT = "checked_out"


class EventType(Enum):
    """Simulation event types."""
    BOOKING = "booking"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


@dataclass(frozen=True, order=True)
class SimTime:
    """Simulated time as a (day, hour) pair."""
    day: int = 0
    hour: int = 0

    def __post_init__(self):
        if self.day < 0 or not 0 <= self.hour < HOURS_IN_DAY:
            raise ValueError(f"Invalid simulated time: day={self.day}, hour={self.hour}")

    @classmethod
    def from_hours(cls, hours: int) -> 'SimTime':
        """Build from a total number of elapsed hours."""
        return cls(day=hours // HOURS_IN_DAY, hour=hours % HOURS_IN_DAY)

    @property
    def total_hours(self) -> int:
        return self.day * HOURS_IN_DAY + self.hour

    def add_hours(self, hours: int) -> 'SimTime':
        """Time shifted forward by a number of hours."""
        return SimTime.from_hours(self.total_hours + hours)

    def __str__(self) -> str:
        return f"day {self.day}, {self.hour:02d}:00"


@dataclass
class Booking:
    """Request binding a guest to a room type for an inclusive day range."""
    guest_id: int
    room_type: RoomType  # Requested type
    day_from: int
    day_to: int

    # Set by the booking system
    status: BookingStatus = field(default=BookingStatus.REQUESTED, compare=False)
    assigned_type: Optional[RoomType] = field(default=None, compare=False)

    @property
    def is_valid_range(self) -> bool:
        return self.day_from <= self.day_to

    @property
    def nights(self) -> int:
        """Number of days in the stay (0 for an inverted range)."""
        return max(0, self.day_to - self.day_from + 1)

    @property
    def is_upgraded(self) -> bool:
        return self.assigned_type is not None and self.assigned_type != self.room_type

    def __str__(self) -> str:
        return (f"Booking(guest={self.guest_id}, {self.room_type}, "
                f"days {self.day_from}-{self.day_to}, {self.status.value})")


# Type aliases for clarity
GuestId = int
Cost = int
RoomCounts = Dict[RoomType, int]
RoomCosts = Dict[RoomType, Cost]
