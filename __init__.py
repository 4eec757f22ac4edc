"""PyHotel RM - Hotel room allocation and demand simulator."""

__version__ = "0.1.0"
__author__ = "Your Name"
__license__ = "MIT"

from core.simulator import HotelSimulation, DemandSimulator, SimulationConfig, SimulationResults
from core.reservation import StrategyType, create_booking_system
from core.models import *
from core.events import EventManager

__all__ = [
    'HotelSimulation',
    'DemandSimulator',
    'SimulationConfig',
    'SimulationResults',
    'StrategyType',
    'create_booking_system',
    'EventManager',
]
