"""
Demand generation engine for hotel booking requests.

This module draws the random parts of a new booking:
- Lead time (days from today until arrival)
- Length of stay
- Requested room type (weighted over the registry)
- Interval until the next booking request
"""

from dataclasses import dataclass
from typing import Dict, Optional
import numpy as np
from scipy import stats
import logging

from core.exceptions import ConfigurationError
from core.models import Booking, RoomType, RoomTypeRegistry, SimTime, GuestId, DEFAULT_ROOM_TYPES


@dataclass
class DemandConfig:
    """Configuration of the booking arrival process. All bounds are inclusive."""

    # Days from the booking day until arrival
    min_lead_days: int = 1
    max_lead_days: int = 10

    # Length of stay in days
    min_stay_days: int = 1
    max_stay_days: int = 10

    # Hours between consecutive booking requests
    min_interval_hours: int = 1
    max_interval_hours: int = 5

    # Relative popularity by room type name; missing types get weight 0,
    # None means uniform over all types
    room_type_weights: Optional[Dict[str, float]] = None

    def __post_init__(self):
        """Validate bounds."""
        for name in ("lead_days", "stay_days", "interval_hours"):
            low = getattr(self, f"min_{name}")
            high = getattr(self, f"max_{name}")
            if low < 0 or high < low:
                raise ConfigurationError(f"Invalid {name} bounds: [{low}, {high}]")
        if self.min_stay_days < 1:
            raise ConfigurationError("Stays must last at least one day")
        if self.min_interval_hours < 1:
            raise ConfigurationError("Booking interval must be at least one hour")


class BookingRequestGenerator:
    """
    Generates booking requests for the demand simulator.

    Uses:
    - Discrete uniform distributions for lead time, stay and interval
    - Categorical distribution over room types
    """

    def __init__(
        self,
        config: Optional[DemandConfig] = None,
        registry: Optional[RoomTypeRegistry] = None,
        random_seed: Optional[int] = None
    ):
        """
        Initialize request generator.

        Args:
            config: Demand configuration
            registry: Room types that may be requested
            random_seed: Random seed for reproducibility
        """
        self.config = config or DemandConfig()
        self.registry = registry if registry is not None else DEFAULT_ROOM_TYPES
        self.logger = logging.getLogger('BookingRequestGenerator')

        # Random state
        self.rng = np.random.default_rng(random_seed)

        # scipy's randint excludes the upper bound
        self.lead_days = stats.randint(self.config.min_lead_days, self.config.max_lead_days + 1)
        self.stay_days = stats.randint(self.config.min_stay_days, self.config.max_stay_days + 1)
        self.interval_hours = stats.randint(
            self.config.min_interval_hours, self.config.max_interval_hours + 1
        )
        self.room_type_probs = self._build_room_type_probs()

        # Statistics
        self.requests_generated = 0
        self.requests_by_type: Dict[RoomType, int] = {t: 0 for t in self.registry}

    def _build_room_type_probs(self) -> np.ndarray:
        """Normalize configured weights into a probability vector."""
        weights = self.config.room_type_weights
        if weights is None:
            return np.full(len(self.registry), 1.0 / len(self.registry))

        unknown = []
        for name in weights:
            try:
                self.registry.get(name)
            except KeyError:
                unknown.append(name)
        if unknown:
            raise ConfigurationError(f"Weights given for unknown room types: {', '.join(unknown)}")

        by_code = {self.registry.get(name).code: float(w) for name, w in weights.items()}
        raw = np.array([by_code.get(t.code, 0.0) for t in self.registry])
        if np.any(raw < 0) or raw.sum() <= 0:
            raise ConfigurationError("Room type weights must be non-negative with a positive sum")
        return raw / raw.sum()

    def next_interval(self) -> int:
        """Hours until the next booking request."""
        return int(self.interval_hours.rvs(random_state=self.rng))

    def next_booking_time(self, now: SimTime) -> SimTime:
        """Time of the next booking request, drawn from ``now``."""
        return now.add_hours(self.next_interval())

    def sample_room_type(self) -> RoomType:
        """Draw a requested room type."""
        index = self.rng.choice(len(self.registry), p=self.room_type_probs)
        return self.registry[int(index)]

    def generate(self, guest_id: GuestId, today: int) -> Booking:
        """
        Draw a single booking request.

        Args:
            guest_id: Identifier to assign
            today: Current simulated day

        Returns:
            Booking with status REQUESTED
        """
        day_from = today + int(self.lead_days.rvs(random_state=self.rng))
        day_to = day_from + int(self.stay_days.rvs(random_state=self.rng)) - 1
        room_type = self.sample_room_type()

        self.requests_generated += 1
        self.requests_by_type[room_type] += 1

        return Booking(
            guest_id=guest_id,
            room_type=room_type,
            day_from=day_from,
            day_to=day_to
        )

    def get_statistics(self) -> Dict[str, any]:
        """Get generation statistics."""
        return {
            'total_requests': self.requests_generated,
            'by_room_type': {str(t): n for t, n in self.requests_by_type.items()},
            'room_type_probabilities': {
                str(t): float(p) for t, p in zip(self.registry, self.room_type_probs)
            }
        }
