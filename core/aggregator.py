"""
Outcome aggregation for simulation runs.

Collects booking acceptance counts, arrival outcomes, billed revenue and a
daily occupancy time series per room type from simulator events.
"""

from typing import Dict, List, Optional
import logging
import numpy as np
import pandas as pd

from core.events import SimulationObserver
from core.models import Booking, RoomType, Cost
from inventory.rooms import RoomInventory


class OutcomeAggregator(SimulationObserver):
    """
    Observer accumulating simulation statistics.

    Reads the inventory to sample occupancy but never mutates engine state.
    Daily samples are taken when the driver calls ``record_day``.
    """

    def __init__(self, inventory: RoomInventory):
        self.inventory = inventory
        self.logger = logging.getLogger('OutcomeAggregator')

        # Booking outcomes
        self.accepted_bookings = 0
        self.rejected_bookings = 0
        self.upgraded_bookings = 0

        # Arrival and departure outcomes
        self.successful_checkins = 0
        self.missed_checkins = 0
        self.checkouts = 0
        self.total_revenue: Cost = 0

        # room type -> [(day, busy fraction)]
        self._samples: Dict[RoomType, List[tuple]] = {t: [] for t in inventory.registry}

    def on_book(self, booking: Booking, success: bool) -> None:
        if success:
            self.accepted_bookings += 1
            if booking.is_upgraded:
                self.upgraded_bookings += 1
        else:
            self.rejected_bookings += 1

    def on_checkin(self, booking: Booking, success: bool) -> None:
        if success:
            self.successful_checkins += 1
        else:
            self.missed_checkins += 1

    def on_checkout(self, booking: Booking, cost: Cost) -> None:
        self.checkouts += 1
        self.total_revenue += cost

    def record_day(self, day: int) -> None:
        """Sample busy/capacity for every room type on a day."""
        for room_type, samples in self._samples.items():
            samples.append((day, self.inventory.occupancy_rate(room_type, day)))
        self.logger.debug(f"Recorded occupancy for day {day}")

    def record_sample(self, room_type: RoomType, day: int, rate: float) -> None:
        """Store one externally computed occupancy sample."""
        self._samples[room_type].append((day, rate))

    @property
    def total_bookings(self) -> int:
        return self.accepted_bookings + self.rejected_bookings

    @property
    def acceptance_rate(self) -> float:
        """Share of booking requests accepted."""
        if self.total_bookings == 0:
            return 0.0
        return self.accepted_bookings / self.total_bookings

    @property
    def days_recorded(self) -> int:
        return max((len(s) for s in self._samples.values()), default=0)

    def samples(self, room_type: RoomType) -> List[float]:
        """Recorded daily occupancy fractions for a room type."""
        return [rate for _, rate in self._samples[room_type]]

    def mean_occupancy(self, room_type: RoomType) -> float:
        """Average of the recorded daily samples (0.0 if none)."""
        rates = self.samples(room_type)
        if not rates:
            return 0.0
        return float(np.mean(rates))

    def weighted_mean_occupancy(self) -> float:
        """Mean occupancy across all types, weighted by capacity."""
        capacities = np.array([self.inventory.capacity(t) for t in self._samples], dtype=float)
        if capacities.sum() == 0:
            return 0.0
        means = np.array([self.mean_occupancy(t) for t in self._samples])
        return float(np.average(means, weights=capacities))

    def occupancy_frame(self) -> pd.DataFrame:
        """Occupancy time series with one row per day and one column per room type."""
        series = {}
        for room_type, samples in self._samples.items():
            if samples:
                days, rates = zip(*samples)
                series[str(room_type)] = pd.Series(list(rates), index=list(days))
            else:
                series[str(room_type)] = pd.Series(dtype=float)
        frame = pd.DataFrame(series)
        frame.index.name = 'day'
        return frame.sort_index()

    def get_statistics(self, room_type: Optional[RoomType] = None) -> Dict[str, float]:
        """Summary statistics, optionally restricted to one room type's occupancy."""
        stats = {
            'total_bookings': self.total_bookings,
            'accepted_bookings': self.accepted_bookings,
            'rejected_bookings': self.rejected_bookings,
            'upgraded_bookings': self.upgraded_bookings,
            'acceptance_rate': self.acceptance_rate,
            'successful_checkins': self.successful_checkins,
            'missed_checkins': self.missed_checkins,
            'checkouts': self.checkouts,
            'total_revenue': self.total_revenue,
        }
        if room_type is not None:
            stats['mean_occupancy'] = self.mean_occupancy(room_type)
        else:
            stats['mean_occupancy'] = self.weighted_mean_occupancy()
        return stats

    def summary(self) -> str:
        """Generate summary report."""
        lines = [
            f"Bookings: {self.accepted_bookings:,} accepted / {self.total_bookings:,} requested "
            f"({self.acceptance_rate:.1%})",
            f"Upgrades: {self.upgraded_bookings:,}",
            f"Check-ins: {self.successful_checkins:,} ok, {self.missed_checkins:,} missed",
            f"Revenue: {self.total_revenue:,}",
            f"Occupancy (capacity-weighted): {self.weighted_mean_occupancy():.1%}",
        ]
        for room_type in self._samples:
            lines.append(f"  {room_type}: {self.mean_occupancy(room_type):.1%}")
        return "\n".join(lines)
