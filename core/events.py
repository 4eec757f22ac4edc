"""
Event dispatch for the demand simulator.

The simulator owns an EventManager and publishes booking, check-in and
check-out events to it. Observers register callbacks instead of being held
as back-references by the engine, so they can come and go independently.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging

from core.models import EventType, Booking, SimTime, Cost

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """Simulation event."""
    timestamp: SimTime
    event_type: EventType
    data: Any = None
    event_id: int = 0

    def __str__(self) -> str:
        return f"Event({self.event_type.value} at {self.timestamp})"


@dataclass
class BookingEvent:
    """Data for booking events."""
    booking: Booking
    success: bool


@dataclass
class CheckinEvent:
    """Data for check-in events."""
    booking: Booking
    success: bool


@dataclass
class CheckoutEvent:
    """Data for check-out events."""
    booking: Booking
    cost: Cost


class SimulationObserver:
    """
    Base class for simulator observers.

    Notifications are fire-and-forget and delivered synchronously from
    within ``DemandSimulator.advance``. Override the ones you need.
    """

    def on_book(self, booking: Booking, success: bool) -> None:
        pass

    def on_checkin(self, booking: Booking, success: bool) -> None:
        pass

    def on_checkout(self, booking: Booking, cost: Cost) -> None:
        pass


Handler = Callable[[Event], Any]


class EventManager:
    """
    Callback registry for simulation events.

    Features:
    - Handlers per event type, called in registration order
    - Observer registration for the three simulator callbacks
    - Event statistics and optional history
    """

    def __init__(self, keep_history: bool = False):
        self._event_handlers: Dict[EventType, List[Handler]] = {et: [] for et in EventType}
        self._observer_handlers: Dict[int, List[tuple]] = {}
        self._keep_history = keep_history
        self._event_history: List[Event] = []

        # Statistics
        self._events_processed = 0
        self._events_by_type: Dict[EventType, int] = {et: 0 for et in EventType}

    def register_handler(self, event_type: EventType, handler: Handler) -> None:
        """
        Register an event handler function.

        Handler signature: handler(event: Event) -> Any
        """
        self._event_handlers[event_type].append(handler)

    def unregister_handler(self, event_type: EventType, handler: Handler) -> bool:
        """Remove a handler; returns False if it was not registered."""
        handlers = self._event_handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def add_observer(self, observer: SimulationObserver) -> None:
        """Subscribe an observer's on_book/on_checkin/on_checkout callbacks."""
        key = id(observer)
        if key in self._observer_handlers:
            return

        def on_book(event: Event) -> None:
            observer.on_book(event.data.booking, event.data.success)

        def on_checkin(event: Event) -> None:
            observer.on_checkin(event.data.booking, event.data.success)

        def on_checkout(event: Event) -> None:
            observer.on_checkout(event.data.booking, event.data.cost)

        handlers = [
            (EventType.BOOKING, on_book),
            (EventType.CHECK_IN, on_checkin),
            (EventType.CHECK_OUT, on_checkout),
        ]
        for event_type, handler in handlers:
            self.register_handler(event_type, handler)
        self._observer_handlers[key] = handlers

    def remove_observer(self, observer: SimulationObserver) -> bool:
        """Unsubscribe an observer; returns False if it was not subscribed."""
        handlers = self._observer_handlers.pop(id(observer), None)
        if handlers is None:
            return False
        for event_type, handler in handlers:
            self.unregister_handler(event_type, handler)
        return True

    def publish(self, timestamp: SimTime, event_type: EventType, data: Any) -> Event:
        """Create an event and dispatch it immediately."""
        event = Event(
            timestamp=timestamp,
            event_type=event_type,
            data=data,
            event_id=self._events_processed
        )
        self.process_event(event)
        return event

    def process_event(self, event: Event) -> None:
        """Process an event by calling registered handlers."""
        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._event_handlers[event.event_type]):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error processing event {event}: {e}")
                raise

        # Update statistics
        self._events_processed += 1
        self._events_by_type[event.event_type] += 1

        if self._keep_history:
            self._event_history.append(event)

    def handler_count(self, event_type: Optional[EventType] = None) -> int:
        """Number of registered handlers, optionally for one event type."""
        if event_type is not None:
            return len(self._event_handlers[event_type])
        return sum(len(h) for h in self._event_handlers.values())

    @property
    def history(self) -> List[Event]:
        return list(self._event_history)

    def get_statistics(self) -> Dict[str, Any]:
        """Get event processing statistics."""
        return {
            'events_processed': self._events_processed,
            'events_by_type': {et.value: n for et, n in self._events_by_type.items()},
            'observers': len(self._observer_handlers),
            'history_size': len(self._event_history)
        }

    def __str__(self) -> str:
        return f"EventManager({self._events_processed} processed, {len(self._observer_handlers)} observers)"
