"""Core simulation components."""

from core.models import *
from core.clock import Clock, ManualClock, WallClock
from core.exceptions import ConfigurationError, InvariantViolation, CapacityExceededError
from core.events import EventManager, Event, SimulationObserver

__all__ = [
    'Clock',
    'ManualClock',
    'WallClock',
    'ConfigurationError',
    'InvariantViolation',
    'CapacityExceededError',
    'EventManager',
    'Event',
    'SimulationObserver',
]
