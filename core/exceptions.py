"""
Error types raised by the allocation engine.

Ordinary booking and check-in rejections are not errors; they are reported
as ``False`` results. These exceptions cover configuration mistakes and
broken internal invariants only.
"""


class ConfigurationError(ValueError):
    """Raised at construction when room counts, costs or demand settings are incomplete or invalid."""


class InvariantViolation(RuntimeError):
    """Raised when an internal engine invariant would be broken."""


class CapacityExceededError(InvariantViolation):
    """Commit attempted on a room type that is already full on some day."""

    def __init__(self, room_type, day: int, capacity: int):
        self.room_type = room_type
        self.day = day
        self.capacity = capacity
        super().__init__(
            f"All {capacity} rooms of type {room_type} are busy on day {day}"
        )
