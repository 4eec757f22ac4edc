"""
Main simulation engine orchestrating all components.

This is the core simulator that coordinates:
- Demand generation (new booking requests)
- Arrival and departure processing
- Room allocation through a booking strategy
- Outcome aggregation and export
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Optional, Any, Union
from enum import Enum
import logging
from tqdm import tqdm

from core.models import (
    Booking, BookingStatus, EventType, RoomTypeRegistry, RoomType,
    RoomCounts, RoomCosts, SimTime, GuestId, HOURS_IN_DAY, DEFAULT_ROOM_TYPES
)
from core.events import (
    EventManager, SimulationObserver, BookingEvent, CheckinEvent, CheckoutEvent
)
from core.clock import Clock, ManualClock
from core.exceptions import ConfigurationError
from core.reservation import BookingSystem, StrategyType, create_booking_system
from core.aggregator import OutcomeAggregator
from demand.generator import DemandConfig, BookingRequestGenerator


class SimulationStatus(Enum):
    """Current simulation status."""
    INITIALIZED = "initialized"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class DemandSimulator:
    """
    Step-driven generator of hotel demand.

    Each call to ``advance`` is one tick: it resolves check-outs and
    check-ins due by the current day, then possibly issues one new booking
    request. The caller controls time granularity by how far it moves the
    clock between calls.
    """

    def __init__(
        self,
        booking_system: BookingSystem,
        clock: Clock,
        generator: Optional[BookingRequestGenerator] = None,
        event_manager: Optional[EventManager] = None
    ):
        """
        Initialize demand simulator.

        Args:
            booking_system: Strategy that receives bookings, arrivals and departures
            clock: Shared read-only simulated clock
            generator: Source of random booking requests
            event_manager: Event dispatcher for observers
        """
        self.booking_system = booking_system
        self.clock = clock
        self.generator = generator or BookingRequestGenerator(registry=booking_system.registry)
        self.event_manager = event_manager or EventManager()
        self.logger = logging.getLogger('DemandSimulator')

        # State
        self._next_guest_id: GuestId = 0
        self._checkins: Dict[int, List[Booking]] = {}
        self._checkouts: Dict[int, List[Booking]] = {}
        self.next_booking_time: SimTime = self.generator.next_booking_time(clock.get_time())

    def add_observer(self, observer: SimulationObserver) -> None:
        """Subscribe an observer to booking, check-in and check-out events."""
        self.event_manager.add_observer(observer)

    def remove_observer(self, observer: SimulationObserver) -> bool:
        """Unsubscribe an observer."""
        return self.event_manager.remove_observer(observer)

    @property
    def pending_checkins(self) -> int:
        return sum(len(b) for b in self._checkins.values())

    @property
    def pending_checkouts(self) -> int:
        return sum(len(b) for b in self._checkouts.values())

    def advance(self) -> Optional[Booking]:
        """
        Run one tick.

        Returns:
            The booking request issued on this tick, if any
        """
        now = self.clock.get_time()
        # Days skipped by a coarse clock step are caught up in order
        for day in self._due_days(now.day):
            self._handle_checkouts(now, day)
            self._handle_checkins(now, day)
        return self._generate_booking(now)

    def _due_days(self, today: int) -> List[int]:
        return sorted(d for d in set(self._checkouts) | set(self._checkins) if d <= today)

    def _handle_checkouts(self, now: SimTime, day: int) -> None:
        for booking in self._checkouts.pop(day, []):
            cost = self.booking_system.get_bill(booking)
            booking.status = BookingStatus.CHECKED_OUT
            self.logger.debug(f"CHECKOUT - guest {booking.guest_id}, billed {cost}")
            self.event_manager.publish(now, EventType.CHECK_OUT, CheckoutEvent(booking, cost))

    def _handle_checkins(self, now: SimTime, day: int) -> None:
        for booking in self._checkins.pop(day, []):
            success = self.booking_system.check_into(booking)
            if success:
                booking.status = BookingStatus.CHECKED_IN
                self.logger.debug(f"CHECKIN - guest {booking.guest_id} on day {now.day}")
            else:
                booking.status = BookingStatus.MISSED
                self._drop_checkout(booking)
                self.logger.info(f"MISSED - guest {booking.guest_id}: no room held for "
                                 f"days {now.day}-{booking.day_to}")
            self.event_manager.publish(now, EventType.CHECK_IN, CheckinEvent(booking, success))

    def _drop_checkout(self, booking: Booking) -> None:
        """Forget the queued departure of a guest who never arrived."""
        day = booking.day_to + 1
        queue = self._checkouts.get(day)
        if queue is None:
            return
        queue[:] = [b for b in queue if b is not booking]
        if not queue:
            del self._checkouts[day]

    def _generate_booking(self, now: SimTime) -> Optional[Booking]:
        if now < self.next_booking_time:
            return None

        booking = self.generator.generate(self._next_guest_id, now.day)
        self._next_guest_id += 1

        success = self.booking_system.book(booking)
        if success:
            self._checkins.setdefault(booking.day_from, []).append(booking)
            self._checkouts.setdefault(booking.day_to + 1, []).append(booking)
            self.logger.debug(f"BOOKED - guest {booking.guest_id}: {booking.room_type} "
                              f"as {booking.assigned_type}, days {booking.day_from}-{booking.day_to}")
        else:
            self.logger.info(f"REJECTED - guest {booking.guest_id}: no {booking.room_type} "
                             f"for days {booking.day_from}-{booking.day_to}")

        self.event_manager.publish(now, EventType.BOOKING, BookingEvent(booking, success))
        self.next_booking_time = self.generator.next_booking_time(now)
        return booking

    def __str__(self) -> str:
        return (f"DemandSimulator(next booking at {self.next_booking_time}, "
                f"{self.pending_checkins} check-ins and {self.pending_checkouts} check-outs pending)")


def default_room_counts() -> Dict[str, int]:
    return {"Single": 10, "Double": 8, "DoubleWithSofa": 6, "HalfLux": 6, "Lux": 4}


def default_room_costs() -> Dict[str, int]:
    return {"Single": 3000, "Double": 4000, "DoubleWithSofa": 4500, "HalfLux": 5000, "Lux": 10000}


def resolve_room_table(
    table: Dict[Union[RoomType, str], int],
    registry: RoomTypeRegistry
) -> Dict[RoomType, int]:
    """Key a per-type table by RoomType, accepting type names as keys."""
    resolved = {}
    for key, value in table.items():
        if isinstance(key, RoomType):
            room_type = key
        else:
            try:
                room_type = registry.get(key)
            except KeyError as e:
                raise ConfigurationError(str(e)) from None
        resolved[room_type] = value
    return resolved


@dataclass
class SimulationConfig:
    """Configuration for simulation run."""

    # Hotel
    room_counts: Dict[Union[RoomType, str], int] = field(default_factory=default_room_counts)
    room_costs: Dict[Union[RoomType, str], int] = field(default_factory=default_room_costs)
    strategy: Union[StrategyType, str] = StrategyType.SMART

    # Demand
    demand: DemandConfig = field(default_factory=DemandConfig)

    # Time
    start_day: int = 0
    duration_days: int = 90
    step_hours: int = 1

    # Simulation parameters
    random_seed: Optional[int] = 42
    progress_bar: bool = True
    keep_event_history: bool = False

    # Logging
    configure_logging: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = None
    export_log: bool = False

    # Output
    output_dir: str = "simulation_results"
    export_csv: bool = False

    def __post_init__(self):
        if self.duration_days < 1:
            raise ConfigurationError("duration_days must be at least 1")
        if self.step_hours < 1:
            raise ConfigurationError("step_hours must be at least 1")
        if self.start_day < 0:
            raise ConfigurationError("start_day must be non-negative")


@dataclass
class SimulationResults:
    """Results from a simulation run."""

    # Metadata
    config: SimulationConfig = None
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    # Simulated span
    steps: int = 0
    days_simulated: int = 0

    # Outcomes
    total_bookings: int = 0
    accepted_bookings: int = 0
    rejected_bookings: int = 0
    upgraded_bookings: int = 0
    successful_checkins: int = 0
    missed_checkins: int = 0
    total_revenue: int = 0

    # Occupancy
    mean_occupancy: Dict[str, float] = field(default_factory=dict)
    weighted_mean_occupancy: float = 0.0

    # Exported files
    exported_files: Dict[str, str] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        """Simulation run duration in seconds."""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    @property
    def acceptance_rate(self) -> float:
        if self.total_bookings == 0:
            return 0.0
        return self.accepted_bookings / self.total_bookings

    def summary(self) -> str:
        """Generate summary report."""
        occupancy = "\n".join(f"  {name}: {rate:.1%}" for name, rate in self.mean_occupancy.items())
        return f"""
Simulation Results Summary
{'='*50}
Duration: {self.duration_seconds:.1f} seconds
Simulated: {self.days_simulated} days in {self.steps:,} steps
Bookings: {self.accepted_bookings:,} / {self.total_bookings:,} ({self.acceptance_rate:.1%})
Upgrades: {self.upgraded_bookings:,}
Check-ins: {self.successful_checkins:,} ok, {self.missed_checkins:,} missed
Total Revenue: {self.total_revenue:,}
Occupancy: {self.weighted_mean_occupancy:.1%}
{occupancy}
"""


class HotelSimulation:
    """
    Driver wiring a clock, booking system, demand simulator and observers.

    Moves a ManualClock forward by ``step_hours`` after every tick and
    samples occupancy each time a new day inside the run is entered.
    """

    def __init__(
        self,
        config: SimulationConfig,
        registry: Optional[RoomTypeRegistry] = None
    ):
        """
        Initialize simulation.

        Args:
            config: Simulation configuration
            registry: Room types (defaults to the standard hotel set)

        Raises:
            ConfigurationError: if the hotel tables are incomplete
        """
        self.config = config
        self.registry = registry if registry is not None else DEFAULT_ROOM_TYPES
        self.status = SimulationStatus.INITIALIZED

        if config.configure_logging:
            self._setup_logging()
        self.logger = logging.getLogger('HotelSimulation')

        self._initialize_components()

    def _setup_logging(self) -> None:
        """Configure logging."""
        level = getattr(logging, self.config.log_level.upper())

        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers = []

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if self.config.export_log:
            if not self.config.log_file:
                from pathlib import Path
                log_dir = Path(self.config.output_dir)
                log_dir.mkdir(parents=True, exist_ok=True)
                timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
                self.config.log_file = str(log_dir / f"simulation_{timestamp}.log")

            file_handler = logging.FileHandler(self.config.log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logging.getLogger('HotelSimulation').info(f"Logging to file: {self.config.log_file}")

    def _initialize_components(self) -> None:
        """Initialize all simulation components."""
        room_counts: RoomCounts = resolve_room_table(self.config.room_counts, self.registry)
        room_costs: RoomCosts = resolve_room_table(self.config.room_costs, self.registry)

        self.clock = ManualClock(SimTime(day=self.config.start_day))
        self.booking_system = create_booking_system(
            room_counts, room_costs, self.config.strategy, self.clock, self.registry
        )
        self.generator = BookingRequestGenerator(
            self.config.demand, self.registry, self.config.random_seed
        )
        self.event_manager = EventManager(keep_history=self.config.keep_event_history)
        self.simulator = DemandSimulator(
            self.booking_system, self.clock, self.generator, self.event_manager
        )

        self.aggregator = OutcomeAggregator(self.booking_system.inventory)
        self.simulator.add_observer(self.aggregator)

        self.data_exporter = None
        if self.config.export_csv:
            from core.data_export import DataExporter
            self.data_exporter = DataExporter(output_dir=self.config.output_dir, clock=self.clock)
            self.simulator.add_observer(self.data_exporter)

        self.steps = 0
        self._current_day = self.clock.day
        # first day past the run; it is reached but never ticked
        self._end_day = self.config.start_day + self.config.duration_days
        self.aggregator.record_day(self._current_day)

        self.logger.info(f"Initialized {type(self.booking_system).__name__} with "
                         f"{self.booking_system.inventory}")

    def add_observer(self, observer: SimulationObserver) -> None:
        """Subscribe an extra observer (e.g. a display layer)."""
        self.simulator.add_observer(observer)

    def step(self, hours: Optional[int] = None) -> Optional[Booking]:
        """
        Run one tick, then move the clock forward.

        Args:
            hours: Hours to advance after the tick (defaults to config.step_hours)

        Returns:
            Booking request issued on this tick, if any
        """
        hours = self.config.step_hours if hours is None else hours
        booking = self.simulator.advance()
        self.clock.add(hours)
        self.steps += 1

        new_day = self.clock.day
        while self._current_day < new_day:
            self._current_day += 1
            if self._current_day < self._end_day:
                self.aggregator.record_day(self._current_day)
        return booking

    def run(self) -> SimulationResults:
        """
        Run the complete simulation.

        Returns:
            SimulationResults with all metrics
        """
        self.logger.info("="*60)
        self.logger.info("Starting Simulation")
        self.logger.info("="*60)
        self.logger.info(f"Strategy: {type(self.booking_system).__name__}")
        self.logger.info(f"Days: {self.config.start_day} to "
                         f"{self.config.start_day + self.config.duration_days}")

        self.status = SimulationStatus.RUNNING
        results = SimulationResults(config=self.config)

        end_hours = (self.config.start_day + self.config.duration_days) * HOURS_IN_DAY
        total_steps = -(-(end_hours - self.clock.get_time().total_hours) // self.config.step_hours)

        pbar = None
        if self.config.progress_bar:
            pbar = tqdm(total=total_steps, desc="Simulating")

        try:
            while self.clock.get_time().total_hours < end_hours:
                self.step()
                if pbar:
                    pbar.update(1)

            self.status = SimulationStatus.COMPLETED

        except Exception as e:
            self.logger.error(f"Simulation error: {e}", exc_info=True)
            self.status = SimulationStatus.ERROR
            raise

        finally:
            if pbar:
                pbar.close()
            results.end_time = datetime.now()

        self._fill_results(results)

        self.logger.info("="*60)
        self.logger.info("Simulation Complete")
        self.logger.info("="*60)
        self.logger.info(results.summary())

        if self.data_exporter:
            self.logger.info("Exporting simulation data to CSV files...")
            self.data_exporter.set_occupancy(self.aggregator.occupancy_frame())
            exported_files = self.data_exporter.export_all()
            results.exported_files = {k: str(v) for k, v in exported_files.items()}
            for data_type, filepath in exported_files.items():
                self.logger.info(f"  - {data_type}: {filepath}")

        return results

    def _fill_results(self, results: SimulationResults) -> None:
        aggregator = self.aggregator
        results.steps = self.steps
        results.days_simulated = self._current_day - self.config.start_day
        results.total_bookings = aggregator.total_bookings
        results.accepted_bookings = aggregator.accepted_bookings
        results.rejected_bookings = aggregator.rejected_bookings
        results.upgraded_bookings = aggregator.upgraded_bookings
        results.successful_checkins = aggregator.successful_checkins
        results.missed_checkins = aggregator.missed_checkins
        results.total_revenue = aggregator.total_revenue
        results.mean_occupancy = {
            str(t): aggregator.mean_occupancy(t) for t in self.registry
        }
        results.weighted_mean_occupancy = aggregator.weighted_mean_occupancy()

    def get_statistics(self) -> Dict[str, Any]:
        """Current statistics from all components."""
        return {
            'status': self.status.value,
            'time': str(self.clock.get_time()),
            'steps': self.steps,
            'outcomes': self.aggregator.get_statistics(),
            'demand': self.generator.get_statistics(),
            'events': self.event_manager.get_statistics(),
        }
