"""
Simulated time sources.

Every component receives its clock explicitly at construction. The engine
only reads the clock; advancing it is the job of the external driver.
"""

from abc import ABC, abstractmethod
import time

from core.models import SimTime, HOURS_IN_DAY

SECONDS_IN_HOUR = 3600


class Clock(ABC):
    """Read-only source of the current simulated time."""

    @abstractmethod
    def get_time(self) -> SimTime:
        """Current (day, hour); never decreases across calls."""
        pass

    @property
    def day(self) -> int:
        return self.get_time().day


class ManualClock(Clock):
    """Clock moved forward explicitly by the driver."""

    def __init__(self, start: SimTime = SimTime()):
        self._hours = start.total_hours

    def get_time(self) -> SimTime:
        return SimTime.from_hours(self._hours)

    def add(self, hours: int) -> SimTime:
        """Advance by a number of hours and return the new time."""
        if hours < 0:
            raise ValueError(f"Clock cannot move backwards (got {hours} hours)")
        self._hours += hours
        return self.get_time()

    def __str__(self) -> str:
        return f"ManualClock({self.get_time()})"


class WallClock(Clock):
    """
    Clock derived from elapsed real time.

    One simulated hour passes every ``seconds_per_hour`` real seconds,
    counted from construction. Uses a monotonic timer so the result
    never decreases.
    """

    def __init__(self, seconds_per_hour: float = SECONDS_IN_HOUR):
        if seconds_per_hour <= 0:
            raise ValueError("seconds_per_hour must be positive")
        self.seconds_per_hour = seconds_per_hour
        self._start = time.monotonic()

    def get_time(self) -> SimTime:
        elapsed = time.monotonic() - self._start
        hours = int(elapsed // self.seconds_per_hour)
        return SimTime(day=hours // HOURS_IN_DAY, hour=hours % HOURS_IN_DAY)
