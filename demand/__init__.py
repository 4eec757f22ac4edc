"""
Demand generation for the hotel simulator.
"""

from .generator import (
    DemandConfig,
    BookingRequestGenerator
)

__all__ = [
    'DemandConfig',
    'BookingRequestGenerator'
]
